"""
Error Handling Utilities
Application error taxonomy and the mapping from persistence failures
"""
from flask import current_app, has_app_context, has_request_context, request
from sqlalchemy.exc import DisconnectionError, OperationalError
from config import Config
from weddinghub.logger_config import log_error_with_context


class AppError(Exception):
    """Base class for errors that are reported to the client as JSON"""
    status_code = 500
    code = 'INTERNAL_ERROR'
    message = 'An unexpected error occurred'

    def __init__(self, message=None, **extra):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.extra = extra

    def to_dict(self):
        body = {"error": self.message, "code": self.code}
        body.update(self.extra)
        return body


class ValidationError(AppError):
    status_code = 400
    code = 'VALIDATION_ERROR'
    message = 'Invalid input provided'

    def __init__(self, message=None, missing_fields=None, errors=None):
        extra = {}
        if missing_fields:
            extra['missing_fields'] = list(missing_fields)
        if errors:
            extra['errors'] = errors
        super().__init__(message, **extra)
        self.missing_fields = list(missing_fields or [])
        self.errors = errors or {}


class Unauthorized(AppError):
    status_code = 401
    code = 'UNAUTHORIZED'
    message = 'Authentication required'


class InvalidCredentials(Unauthorized):
    code = 'INVALID_CREDENTIALS'
    message = 'Invalid credentials'


class NotFound(AppError):
    status_code = 404
    code = 'NOT_FOUND'
    message = 'The requested resource was not found'


class Conflict(AppError):
    # Reported as 400, the status clients already handle for duplicate registrations
    status_code = 400
    code = 'CONFLICT'
    message = 'This record already exists'


class ServiceUnavailable(AppError):
    status_code = 503
    code = 'SERVICE_UNAVAILABLE'
    message = 'Service temporarily unavailable. Please try again later.'


class Internal(AppError):
    status_code = 500
    code = 'INTERNAL_ERROR'


def log_error(error, context=None):
    """
    Log error details server-side only

    Args:
        error: Exception object
        context: Optional context information (dict)
    """
    if context is None:
        context = {}

    if has_request_context():
        context['endpoint'] = request.path
        context['method'] = request.method
        context['remote_addr'] = request.remote_addr

    log_error_with_context(error, context)


def get_error_message(error, default_message="An error occurred"):
    """
    Get appropriate error message based on environment

    Returns:
        str: Error message (detailed in dev, generic in production)
    """
    if isinstance(error, AppError):
        return error.message
    env = current_app.config.get('ENV') if has_app_context() else Config.ENV
    if env == 'production':
        return default_message
    return f"{type(error).__name__}: {str(error)}"


def from_persistence_error(error):
    """
    Map a SQLAlchemy exception to an AppError

    Unreachable databases become ServiceUnavailable, everything else Internal.
    """
    if isinstance(error, (OperationalError, DisconnectionError)):
        return ServiceUnavailable("Database operation failed. Please try again later.")
    return Internal(get_error_message(error, "An unexpected error occurred"))
