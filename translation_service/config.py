"""Configuration classes for the translation service.

Values come from environment variables (a .env file is loaded by the
package on import). Pick a class with ``create_app(config_name)``.
"""

import os


def _env_bool(name, default):
    return os.getenv(name, str(default)).lower() in ('1', 'true', 'yes', 'on')


def _database_url():
    url = os.getenv('DATABASE_URL', 'sqlite:///translations.db')
    # Some hosts still hand out the old postgres:// scheme
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


class Config:
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    AUTO_CREATE_TABLES = _env_bool('AUTO_CREATE_TABLES', True)

    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    JWT_ACCESS_TOKEN_EXPIRES = int(os.getenv('JWT_ACCESS_TOKEN_EXPIRES', 86400))

    REDIS_URL = os.getenv('REDIS_URL')
    CACHE_KEY_PREFIX = os.getenv('CACHE_KEY_PREFIX', 'translations:')
    TAGS_CACHE_TTL = int(os.getenv('TAGS_CACHE_TTL', 3600))
    LOCALES_CACHE_TTL = int(os.getenv('LOCALES_CACHE_TTL', 3600))

    EXPORT_CHUNK_SIZE = int(os.getenv('EXPORT_CHUNK_SIZE', 1000))
    TRANSLATION_DUMP_CHUNK_SIZE = int(os.getenv('TRANSLATION_DUMP_CHUNK_SIZE', 2000))

    KEY_MAX_LENGTH = 255
    LOCALE_MAX_LENGTH = 10
    TAG_NAME_MAX_LENGTH = 64

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_JSON = _env_bool('LOG_JSON', False)

    RATELIMIT_ENABLED = _env_bool('RATELIMIT_ENABLED', True)
    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')
    LOGIN_RATE_LIMIT = os.getenv('LOGIN_RATE_LIMIT', '10 per minute')

    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')


class DevelopmentConfig(Config):
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG')


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    AUTO_CREATE_TABLES = True
    JWT_SECRET_KEY = 'test-secret-key-for-testing'
    REDIS_URL = None
    EXPORT_CHUNK_SIZE = 2
    TRANSLATION_DUMP_CHUNK_SIZE = 2
    RATELIMIT_ENABLED = False
    LOG_LEVEL = 'WARNING'


class ProductionConfig(Config):
    AUTO_CREATE_TABLES = _env_bool('AUTO_CREATE_TABLES', False)


CONFIGS = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
}


def get_config(config_name):
    """Return the config class for ``config_name`` (development if unknown)."""
    return CONFIGS.get(config_name or 'development', DevelopmentConfig)
