"""
Environment Variable Validation
Validates required environment variables on application startup
"""
import os
import sys
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

ENV = os.environ.get('ENV', 'production')
REQUIRED_VARS = {
    'production': [
        'SECRET_KEY',
        'DB_USER',
        'DB_PASSWORD',
        'DB_HOST',
        'DB_NAME',
        'MAIL_USERNAME',
        'MAIL_PASSWORD',
    ]
}

OPTIONAL_VARS = [
    'ADMIN_EMAIL',
    'ADMIN_BOOTSTRAP_TOKEN',
    'APP_BASE_URL',
    'SUPPORT_EMAIL',
    'DATABASE_URL',
    'DB_PORT',
    'DB_POOL_SIZE',
    'DB_MAX_OVERFLOW',
    'DB_POOL_TIMEOUT',
    'DB_CONNECT_TIMEOUT',
    'MAIL_SERVER',
    'MAIL_PORT',
    'MAIL_USE_TLS',
    'MAIL_USE_SSL',
    'MAIL_DEFAULT_SENDER',
    'ALLOWED_ORIGINS',
    'AUTH_COOKIE_SECURE',
    'AUTH_COOKIE_SAMESITE',
    'AUTH_COOKIE_DOMAIN',
    'SESSION_MAX_AGE',
    'SESSION_UPDATE_AGE',
    'RATELIMIT_ENABLED',
    'LOGIN_RATE_LIMIT',
    'LOG_DIR',
    'SENTRY_DSN',
]


def validate_environment(environ=None):
    """
    Validate all required environment variables

    Args:
        environ: Mapping to check (defaults to os.environ)

    Returns:
        Tuple of (is_valid, missing_vars, warnings)
    """
    environ = os.environ if environ is None else environ
    missing_vars = []
    warnings = []

    required = REQUIRED_VARS.get('production', [])

    for var in required:
        if not environ.get(var):
            missing_vars.append(var)

    if not environ.get('ADMIN_EMAIL'):
        warnings.append("ADMIN_EMAIL not set - using default admin@muslimweddinghub.com")

    if not environ.get('ALLOWED_ORIGINS'):
        warnings.append("ALLOWED_ORIGINS not set - CORS may not work correctly")

    is_valid = len(missing_vars) == 0

    return is_valid, missing_vars, warnings


def print_validation_results():
    """Print validation results to console"""
    is_valid, missing_vars, warnings = validate_environment()

    print(f"\n{'='*60}")
    print(f"Environment Variable Validation - {ENV.upper()}")
    print(f"{'='*60}\n")

    if is_valid:
        print("All required environment variables are set\n")
    else:
        print("Missing required environment variables:\n")
        for var in missing_vars:
            print(f"  - {var}")
        print("\nPlease set these variables in your .env file or environment\n")

    if warnings:
        print("Warnings:\n")
        for warning in warnings:
            print(f"  - {warning}")
        print()

    print(f"{'='*60}\n")

    return is_valid


if __name__ == '__main__':
    is_valid = print_validation_results()
    if not is_valid:
        sys.exit(1)
