from flask import Flask, request, jsonify, g
from flask_cors import CORS
from flask_mail import Mail
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_wtf.csrf import CSRFProtect
from flask_talisman import Talisman
from sqlalchemy.exc import SQLAlchemyError

from config import Config
from weddinghub.models import db
from weddinghub.schemas import ma
from weddinghub.errors import AppError, from_persistence_error, log_error
from weddinghub.auth import set_auth_cookie
from weddinghub.logger_config import (
    app_logger,
    access_logger,
    error_logger
)

# Initialize extensions (without app binding)
mail = Mail()
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://"
)
csrf = CSRFProtect()


def create_app(config_class=Config):
    """
    Flask application factory
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    if app.config.get('ENV') == 'production' and not app.config.get('SECRET_KEY'):
        from validate_env import validate_environment
        _, missing, _ = validate_environment()
        raise RuntimeError(f"Refusing to start without required settings: {', '.join(missing) or 'SECRET_KEY'}")

    # Initialize extensions
    db.init_app(app)
    ma.init_app(app)
    mail.init_app(app)
    limiter.init_app(app)

    # CSRF is disabled for the JSON API (WTF_CSRF_ENABLED = False in config)
    if app.config.get('WTF_CSRF_ENABLED', False):
        csrf.init_app(app)

    csp = {
        "default-src": "'self'",
        "img-src": ["'self'", "data:", "https:"],
        "style-src": ["'self'", "'unsafe-inline'"],
        "frame_ancestors": "'none'"
    }
    Talisman(app, content_security_policy=csp, force_https=False)

    # Credentialed CORS needs explicit origins
    CORS(
        app,
        supports_credentials=True,
        origins=[origin.strip() for origin in app.config['ALLOWED_ORIGINS'] if origin.strip()],
        expose_headers=['X-Refreshed-Token']
    )

    # Register blueprints
    try:
        from weddinghub.routes import (
            auth_routes,
            vendor_routes,
            admin_routes,
            customer_routes,
            health
        )

        app.register_blueprint(auth_routes.bp, url_prefix="/api")
        app.register_blueprint(vendor_routes.bp, url_prefix="/api")
        app.register_blueprint(admin_routes.bp, url_prefix="/api")
        app.register_blueprint(customer_routes.bp, url_prefix="/api")
        app.register_blueprint(health.bp, url_prefix="/api")

        app_logger.info("All blueprints registered successfully")
    except Exception as e:
        app_logger.exception(f"Error registering blueprints: {e}")
        raise

    from weddinghub.commands import register_commands
    register_commands(app)

    # Register handlers
    register_error_handlers(app)
    register_request_handlers(app)

    # Startup logs
    app_logger.info("Flask application initialized successfully")
    app_logger.info(f"Environment: {app.config.get('ENV')}")
    app_logger.info(f"Debug mode: {app.config.get('DEBUG')}")

    return app


def register_error_handlers(app):
    """
    Register global error handlers
    """

    def expects_json():
        if request.path.startswith("/api/"):
            return True
        if request.headers.get("Accept", "").startswith("application/json"):
            return True
        return False

    @app.errorhandler(AppError)
    def app_error(error):
        if error.status_code >= 500:
            log_error(error)
        else:
            app_logger.warning(f"{request.method} {request.path} - {error.code}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def persistence_error(error):
        db.session.rollback()
        log_error(error, {'kind': 'persistence'})
        mapped = from_persistence_error(error)
        return jsonify(mapped.to_dict()), mapped.status_code

    @app.errorhandler(404)
    def not_found(error):
        if expects_json():
            return jsonify({
                "error": "Endpoint not found",
                "path": request.path,
                "method": request.method
            }), 404
        return error

    @app.errorhandler(405)
    def method_not_allowed(error):
        if expects_json():
            return jsonify({
                "error": "Method not allowed",
                "path": request.path,
                "method": request.method
            }), 405
        return error

    @app.errorhandler(429)
    def rate_limited(error):
        return jsonify({
            "error": "Too many requests",
            "message": str(error.description)
        }), 429

    @app.errorhandler(500)
    def internal_error(error):
        error_logger.exception("Internal server error")
        if expects_json():
            return jsonify({
                "error": "Internal server error",
                "code": "INTERNAL_ERROR"
            }), 500
        return error


def register_request_handlers(app):
    """
    Register before/after request handlers
    """

    @app.before_request
    def log_request():
        if request.path.startswith("/api/"):
            access_logger.info(
                f"{request.remote_addr} - {request.method} {request.path}"
            )

    @app.after_request
    def log_response(response):
        if request.path.startswith("/api/"):
            access_logger.info(
                f"{request.method} {request.path} - {response.status_code}"
            )

        # Session reissued by require_auth
        refreshed = g.get('refreshed_token')
        if refreshed:
            set_auth_cookie(response, refreshed)
            response.headers['X-Refreshed-Token'] = refreshed

        # Security headers
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        return response
