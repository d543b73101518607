"""
Authentication Routes Blueprint
Login, logout and session endpoints
"""
from flask import Blueprint, request, jsonify, current_app

from weddinghub import limiter
from weddinghub.auth import (
    verify_credentials,
    generate_token,
    project_session_claims,
    require_auth,
    set_auth_cookie,
    clear_auth_cookie,
)
from weddinghub.errors import NotFound, InvalidCredentials
from weddinghub.logger_config import log_auth_event
from weddinghub.validation import validate_request_data, LoginSchema

# Create blueprint
bp = Blueprint('auth', __name__)


def login_rate_limit():
    return current_app.config['LOGIN_RATE_LIMIT']


@bp.route('/auth/login', methods=['POST'])
@limiter.limit(login_rate_limit)
def login():
    """
    POST /api/auth/login
    Authenticate with email and password

    Request Body:
        {"email": "...", "password": "..."}

    Returns:
        {"message": "Login successful", "token": "...", "user": {session claims}}
    """
    data = validate_request_data(LoginSchema, request.get_json(silent=True) or {})

    try:
        user = verify_credentials(data['email'], data['password'])
    except (NotFound, InvalidCredentials) as e:
        log_auth_event('login', False, data['email'], ip_address=request.remote_addr, error=type(e).__name__)
        # Unknown email and wrong password are indistinguishable to the client
        raise InvalidCredentials()

    token = generate_token(user)
    log_auth_event('login', True, user.email, user.id, user.role, request.remote_addr)

    response = jsonify({
        "message": "Login successful",
        "token": token,
        "user": public_session(project_session_claims(user))
    })
    set_auth_cookie(response, token)
    return response, 200


@bp.route('/auth/logout', methods=['POST'])
def logout():
    """
    POST /api/auth/logout
    Clear the session cookie
    """
    response = jsonify({"message": "Logged out successfully"})
    clear_auth_cookie(response)
    return response, 200


@bp.route('/auth/session', methods=['GET'])
@require_auth
def current_session():
    """
    GET /api/auth/session
    Current session claims, refreshed from the database when stale
    """
    claims = request.current_user
    return jsonify({
        "user": public_session(claims),
        "expires": claims.get('exp')
    }), 200


def public_session(claims):
    """Client view of session claims"""
    return {
        "id": claims.get('user_id'),
        "email": claims.get('email'),
        "name": claims.get('name'),
        "role": claims.get('role'),
        "vendor": claims.get('vendor'),
    }
