import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'pwapi-dev-secret-change-in-production'
    VERSION    = os.environ.get('APP_VERSION', '1.0.0')
    LOG_LEVEL  = os.environ.get('LOG_LEVEL', 'INFO').upper()

    # Upper bound on what /strength will analyze; the core itself has no limit
    MAX_ANALYZE_LENGTH  = int(os.environ.get('MAX_ANALYZE_LENGTH', 1000))
    DEFAULT_BATCH_COUNT = 5

    # Comma separated list, or '*' for any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')

    JSON_SORT_KEYS = False


class TestingConfig(Config):
    TESTING   = True
    LOG_LEVEL = 'WARNING'
