import os
from datetime import timedelta
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_bool(name, default):
    return os.environ.get(name, str(default)).lower() == 'true'


class Config:
    # Environment Configuration
    ENV = os.environ.get('ENV', 'production')
    DEBUG = False
    TESTING = False

    # Secret key for JWT signing - create_app refuses to start without it in production
    SECRET_KEY = os.environ.get('SECRET_KEY')

    # Platform administrator used to bootstrap the admin role
    ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL', 'admin@muslimweddinghub.com').strip().lower()
    # Shared secret for POST /api/admin/set-password; the endpoint is disabled when unset
    ADMIN_BOOTSTRAP_TOKEN = os.environ.get('ADMIN_BOOTSTRAP_TOKEN')
    APP_BASE_URL = os.environ.get('APP_BASE_URL', 'http://localhost:5000')
    SUPPORT_EMAIL = os.environ.get('SUPPORT_EMAIL', 'support@muslimweddinghub.com')

    # Database Credentials (MySQL when DB_* variables are set)
    MYSQL_USER = os.environ.get('DB_USER')
    MYSQL_PASSWORD = os.environ.get('DB_PASSWORD')
    MYSQL_HOST = os.environ.get('DB_HOST')
    MYSQL_PORT = int(os.environ.get('DB_PORT', 3306))
    MYSQL_DB = os.environ.get('DB_NAME')

    if MYSQL_USER and MYSQL_PASSWORD and MYSQL_HOST and MYSQL_DB:
        SQLALCHEMY_DATABASE_URI = f"mysql+pymysql://{MYSQL_USER}:{MYSQL_PASSWORD}@{MYSQL_HOST}:{MYSQL_PORT}/{MYSQL_DB}"

        DB_POOL_SIZE = int(os.environ.get('DB_POOL_SIZE', 10))
        DB_MAX_OVERFLOW = int(os.environ.get('DB_MAX_OVERFLOW', 20))
        DB_POOL_TIMEOUT = int(os.environ.get('DB_POOL_TIMEOUT', 30))
        DB_CONNECT_TIMEOUT = int(os.environ.get('DB_CONNECT_TIMEOUT', 10))

        SQLALCHEMY_ENGINE_OPTIONS = {
            'pool_pre_ping': True,  # Verify connections before using
            'pool_recycle': 280,  # Below MySQL wait_timeout
            'pool_size': DB_POOL_SIZE,
            'max_overflow': DB_MAX_OVERFLOW,
            'pool_timeout': DB_POOL_TIMEOUT,
            'connect_args': {
                'connect_timeout': DB_CONNECT_TIMEOUT,
                'read_timeout': 30,
                'write_timeout': 30,
                'charset': 'utf8mb4',
                'autocommit': False,  # Use transactions
            }
        }
    else:
        # Development fallback
        SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///weddinghub.db')
        SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True}

    # Disable modification tracking to save resources
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session token configuration (in seconds)
    # Tokens live 30 days and are reissued once they are older than 24 hours
    SESSION_MAX_AGE = int(os.environ.get('SESSION_MAX_AGE', 30 * 24 * 60 * 60))
    SESSION_UPDATE_AGE = int(os.environ.get('SESSION_UPDATE_AGE', 24 * 60 * 60))
    PERMANENT_SESSION_LIFETIME = timedelta(seconds=SESSION_MAX_AGE)

    # access_token cookie
    AUTH_COOKIE_NAME = 'access_token'
    AUTH_COOKIE_SECURE = _env_bool('AUTH_COOKIE_SECURE', True)
    AUTH_COOKIE_SAMESITE = os.environ.get('AUTH_COOKIE_SAMESITE', 'Lax')
    AUTH_COOKIE_DOMAIN = os.environ.get('AUTH_COOKIE_DOMAIN') or None

    # CSRF Protection Configuration
    # DISABLED for APIs - JWT cookies are SameSite and JSON endpoints are not form-posted
    WTF_CSRF_ENABLED = _env_bool('WTF_CSRF_ENABLED', False)
    WTF_CSRF_TIME_LIMIT = 3600  # 1 hour
    WTF_CSRF_SSL_STRICT = ENV == 'production'

    # Rate limiting
    RATELIMIT_ENABLED = _env_bool('RATELIMIT_ENABLED', True)
    RATELIMIT_DEFAULT = os.environ.get('RATELIMIT_DEFAULT', '200 per day;50 per hour')
    LOGIN_RATE_LIMIT = os.environ.get('LOGIN_RATE_LIMIT', '10 per minute')

    # CORS Configuration
    ALLOWED_ORIGINS = os.environ.get(
        'ALLOWED_ORIGINS',
        'http://localhost:3000,http://localhost:5000'
    ).split(',')

    # Request size limit
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB

    # Flask-Mail (SMTP) Configuration
    MAIL_SERVER = os.environ.get('MAIL_SERVER', 'localhost')
    MAIL_PORT = int(os.environ.get('MAIL_PORT', 587))
    MAIL_USE_TLS = _env_bool('MAIL_USE_TLS', True)
    MAIL_USE_SSL = _env_bool('MAIL_USE_SSL', False)
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME')
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER', 'onboarding@muslimweddinghub.com')

    # Production Security Settings
    if ENV == 'production':
        PREFERRED_URL_SCHEME = 'https'


class DevelopmentConfig(Config):
    ENV = 'development'
    DEBUG = True
    SECRET_KEY = Config.SECRET_KEY or 'dev-secret-key-change-me'
    AUTH_COOKIE_SECURE = False


class TestingConfig(Config):
    ENV = 'testing'
    TESTING = True
    SECRET_KEY = 'testing-secret-key-with-enough-length-for-hs256'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    AUTH_COOKIE_SECURE = False
    RATELIMIT_ENABLED = False
    WTF_CSRF_ENABLED = False
    ADMIN_EMAIL = 'admin@muslimweddinghub.com'
    MAIL_SUPPRESS_SEND = True
    ADMIN_BOOTSTRAP_TOKEN = 'testing-bootstrap-token'
