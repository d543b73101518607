"""
Authentication and Authorization Utilities
Credential verification, JWT session issuance/refresh, and route decorators
"""
import time
import jwt
from functools import wraps, lru_cache
from flask import request, current_app, g
from datetime import datetime, timedelta
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from weddinghub.models import db, User, Roles
from weddinghub.errors import Unauthorized, InvalidCredentials, NotFound
from weddinghub.logger_config import app_logger, log_auth_event

# Vendor snapshot keys every session token must carry for vendor accounts
VENDOR_SNAPSHOT_FIELDS = ('id', 'businessName', 'verified', 'verificationStatus')


@lru_cache(maxsize=1)
def _dummy_password_hash():
    return generate_password_hash('timing-equalizer-not-a-real-password')


def hash_password(password):
    return generate_password_hash(password)


def verify_credentials(email, password):
    """
    Validate an email/password pair

    Args:
        email: Account email (case-insensitive)
        password: Plaintext password

    Returns:
        User: the authenticated user, with its vendor relationship loaded

    Raises:
        NotFound: unknown email, or an account without a password
        InvalidCredentials: password mismatch
    """
    email = (email or '').strip().lower()
    user = User.query.filter_by(email=email).first()

    if user is None or not user.password_hash:
        # Same hashing cost as a real comparison so unknown emails are not faster
        check_password_hash(_dummy_password_hash(), password or '')
        raise NotFound("User not found")

    if not check_password_hash(user.password_hash, password or ''):
        raise InvalidCredentials()

    return user


def project_session_claims(user):
    """Session projection of a user and its vendor"""
    vendor = user.vendor
    return {
        'user_id': user.id,
        'email': user.email,
        'name': user.name,
        'role': user.role,
        'vendor': {
            'id': vendor.id,
            'businessName': vendor.business_name,
            'verified': bool(vendor.verified),
            'verificationStatus': vendor.verification_status,
        } if vendor else None,
        'sv': user.session_version or 0,
    }


def generate_token(user, issued_at=None):
    """
    Generate a JWT session token for an authenticated user

    Args:
        user: User instance
        issued_at: Issue time override (UTC datetime)

    Returns:
        str: JWT token
    """
    secret_key = current_app.config.get('SECRET_KEY')
    if not secret_key:
        raise ValueError("SECRET_KEY not configured")

    issued_at = issued_at or datetime.utcnow()
    payload = project_session_claims(user)
    payload['iat'] = issued_at
    payload['exp'] = issued_at + timedelta(seconds=current_app.config['SESSION_MAX_AGE'])

    return jwt.encode(payload, secret_key, algorithm='HS256')


def verify_token(token):
    """
    Verify and decode a JWT token

    Returns:
        dict: Decoded token payload or None if invalid
    """
    try:
        return jwt.decode(token, current_app.config['SECRET_KEY'], algorithms=['HS256'], leeway=10)
    except jwt.ExpiredSignatureError as e:
        app_logger.warning(f"JWT token expired: {e}")
        return None
    except jwt.InvalidTokenError as e:
        app_logger.warning(f"JWT token invalid: {type(e).__name__}: {e}")
        return None


def get_token_from_request():
    """
    Extract JWT token from request

    Priority:
    1. Authorization header (Bearer token)
    2. HttpOnly cookie (access_token)

    Returns:
        str: Token or None
    """
    auth_header = request.headers.get('Authorization', '')
    if auth_header.startswith('Bearer '):
        token = auth_header.split(' ', 1)[1].strip()
        if token:
            return token

    return request.cookies.get(current_app.config['AUTH_COOKIE_NAME'])


def snapshot_is_stale(payload, user):
    """True when the token no longer matches the user's current projection"""
    if payload.get('sv') != (user.session_version or 0):
        return True
    if payload.get('role') != user.role:
        return True
    if user.vendor is not None:
        snapshot = payload.get('vendor') or {}
        if any(field not in snapshot for field in VENDOR_SNAPSHOT_FIELDS):
            return True
    return False


def needs_renewal(payload):
    """Sliding renewal once the token is older than SESSION_UPDATE_AGE"""
    issued_at = payload.get('iat')
    if issued_at is None:
        return True
    return time.time() - issued_at > current_app.config['SESSION_UPDATE_AGE']


def load_session(payload):
    """
    Reconcile token claims with the database

    Reissues the token (stored on g.refreshed_token) when the projection is
    stale or due for renewal. Persistence failures are tolerated and the stale
    claims are served.

    Raises:
        Unauthorized: the user no longer exists
    """
    user_id = payload.get('user_id')
    try:
        user = db.session.get(User, user_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        app_logger.warning(f"Session refresh skipped for user {user_id}, serving cached claims: {e}")
        return payload

    if user is None:
        app_logger.warning(f"Auth failed - User {user_id} not found in DB (Route: {request.path})")
        raise Unauthorized("User no longer exists")

    if snapshot_is_stale(payload, user) or needs_renewal(payload):
        token = generate_token(user)
        g.refreshed_token = token
        log_auth_event('token_refresh', True, user.email, user.id, user.role, request.remote_addr)
        return verify_token(token)

    return payload


def require_auth(f):
    """
    Decorator to require authentication for a route
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = get_token_from_request()
        if not token:
            raise Unauthorized("Authentication required")

        payload = verify_token(token)
        if not payload:
            raise Unauthorized("Invalid or expired token")

        claims = load_session(payload)

        request.current_user = claims
        request.user_id = claims.get('user_id')
        request.role = claims.get('role')

        return f(*args, **kwargs)

    return decorated_function


def is_admin(claims):
    """Capability check backed by the User.role column"""
    return bool(claims) and claims.get('role') == Roles.ADMIN


def require_role(*allowed_roles):
    """
    Decorator to require specific role(s) for a route
    """
    def decorator(f):
        @wraps(f)
        @require_auth
        def decorated_function(*args, **kwargs):
            if request.role not in allowed_roles:
                app_logger.warning(
                    f"Insufficient permissions - Route: {request.path}, "
                    f"User ID: {request.user_id}, Role: {request.role}, Required: {allowed_roles}"
                )
                raise Unauthorized("Insufficient permissions", required_roles=list(allowed_roles))
            return f(*args, **kwargs)

        return decorated_function
    return decorator


def admin_required(f):
    """Decorator to require admin role"""
    return require_role(Roles.ADMIN)(f)


def vendor_required(f):
    """Decorator to require a session carrying a vendor"""
    @wraps(f)
    @require_auth
    def decorated_function(*args, **kwargs):
        vendor = request.current_user.get('vendor')
        if not vendor:
            raise Unauthorized("Unauthorized - vendor access required")
        request.vendor_id = vendor['id']
        return f(*args, **kwargs)

    return decorated_function


def set_auth_cookie(response, token):
    config = current_app.config
    response.set_cookie(
        config['AUTH_COOKIE_NAME'],
        token,
        domain=config.get('AUTH_COOKIE_DOMAIN'),
        httponly=True,
        secure=config.get('AUTH_COOKIE_SECURE', True),
        samesite=config.get('AUTH_COOKIE_SAMESITE', 'Lax'),
        max_age=config['SESSION_MAX_AGE']
    )
    return response


def clear_auth_cookie(response):
    config = current_app.config
    response.delete_cookie(
        config['AUTH_COOKIE_NAME'],
        domain=config.get('AUTH_COOKIE_DOMAIN'),
        path='/'
    )
    return response
