import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    # Database - Render/Neon provide this as DATABASE_URL
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL')

    # Fix for postgres:// vs postgresql://
    if SQLALCHEMY_DATABASE_URI and SQLALCHEMY_DATABASE_URI.startswith('postgres://'):
        SQLALCHEMY_DATABASE_URI = SQLALCHEMY_DATABASE_URI.replace('postgres://', 'postgresql://', 1)

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Bounded connection pool; exhaustion surfaces as DatabaseBusyError (503)
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': int(os.getenv('DB_POOL_SIZE', '10')),
        'max_overflow': int(os.getenv('DB_MAX_OVERFLOW', '5')),
        'pool_timeout': int(os.getenv('DB_POOL_TIMEOUT', '10')),
        'pool_pre_ping': True,
    }

    SECRET_KEY = os.getenv('SECRET_KEY')
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Redis / Celery
    REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')
    CELERY_BROKER_URL = os.getenv('CELERY_BROKER_URL', REDIS_URL)
    CELERY_RESULT_BACKEND = os.getenv('CELERY_RESULT_BACKEND', REDIS_URL)
    CELERY_TASK_ALWAYS_EAGER = _env_bool('CELERY_TASK_ALWAYS_EAGER')
    # Hour (UTC) of the daily recurring-rule sweep
    RECURRING_SWEEP_HOUR = int(os.getenv('RECURRING_SWEEP_HOUR', '6'))

    # Claude / Anthropic
    CLAUDE_API_KEY = os.getenv('CLAUDE_API_KEY')
    # Comma-separated list of models, tried in order
    _claude_models = os.getenv('CLAUDE_MODEL', 'claude-sonnet-4-5,claude-haiku-4-5,claude-opus-4-5')
    CLAUDE_MODELS = [m.strip() for m in _claude_models.split(',') if m.strip()]
    CLAUDE_MODEL = CLAUDE_MODELS[0]
    CLAUDE_MAX_TOKENS = int(os.getenv('CLAUDE_MAX_TOKENS', '800'))
    AI_INSIGHT_TRANSACTION_LIMIT = int(os.getenv('AI_INSIGHT_TRANSACTION_LIMIT', '50'))

    # AWS (SES for email, S3 for uploads)
    AWS_ACCESS_KEY_ID = os.getenv('AWS_ACCESS_KEY_ID')
    AWS_SECRET_ACCESS_KEY = os.getenv('AWS_SECRET_ACCESS_KEY')
    AWS_REGION = os.getenv('AWS_REGION', 'us-east-1')
    SES_SENDER_EMAIL = os.getenv('SES_SENDER_EMAIL')
    AWS_BUCKET_NAME = os.getenv('AWS_BUCKET_NAME')

    # Uploads: 'local' or 's3'
    STORAGE_TYPE = os.getenv('STORAGE_TYPE', 'local')
    UPLOAD_FOLDER = os.getenv(
        'UPLOAD_FOLDER',
        os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'uploads')
    )
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024  # 5MB

    # Password reset
    FRONTEND_URL = os.getenv('FRONTEND_URL', 'http://localhost:5173')
    PASSWORD_RESET_EXPIRES = timedelta(hours=1)

    # Defaults applied to newly provisioned tenants
    DEFAULT_PLAN_TIER = os.getenv('DEFAULT_PLAN_TIER', 'basic')
    DEFAULT_MAX_USERS = int(os.getenv('DEFAULT_MAX_USERS', '5'))
    DEFAULT_AI_USAGE_LIMIT = int(os.getenv('DEFAULT_AI_USAGE_LIMIT', '100'))
