"""Application configuration.

Values are read from the environment (``.env`` is loaded by the package on
import). ``create_app`` picks one of the classes below by name.
"""

import os


def _database_url(default):
    url = os.getenv('DATABASE_URL', default)
    # Render/Heroku hand out postgres:// which SQLAlchemy no longer accepts
    if url and url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


def _env_flag(name, default='False'):
    return os.getenv(name, default).lower() in ('true', '1', 'yes')


class Config:
    SQLALCHEMY_DATABASE_URI = _database_url('sqlite:///contacts.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    JWT_ALGORITHM = 'HS256'
    SESSION_TOKEN_TTL = int(os.getenv('SESSION_TOKEN_TTL', 7200))
    SESSION_AUDIENCE = os.getenv('SESSION_AUDIENCE', 'myPhone')
    SESSION_COOKIE_NAME = 'accessToken'
    SESSION_COOKIE_SECURE = _env_flag('SESSION_COOKIE_SECURE')

    # 'twilio' talks to Twilio Verify, 'static' accepts a single fixed code
    VERIFICATION_BACKEND = os.getenv('VERIFICATION_BACKEND', 'static')
    TWILIO_ACCOUNT_SID = os.getenv('TWILIO_ACCOUNT_SID')
    TWILIO_AUTH_TOKEN = os.getenv('TWILIO_AUTH_TOKEN')
    TWILIO_VERIFY_SERVICE_SID = os.getenv('TWILIO_VERIFY_SERVICE_SID')
    STATIC_VERIFICATION_CODE = os.getenv('STATIC_VERIFICATION_CODE', '123456')

    DEFAULT_COUNTRY_CODE = os.getenv('DEFAULT_COUNTRY_CODE', '1')

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    TESTING = False

    @classmethod
    def validate(cls):
        """Hook for configs that refuse to start with unsafe settings."""


class DevelopmentConfig(Config):
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG')


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    JWT_SECRET_KEY = 'test-secret-key-for-testing'
    VERIFICATION_BACKEND = 'static'
    STATIC_VERIFICATION_CODE = '123456'
    SESSION_TOKEN_TTL = 7200
    SESSION_AUDIENCE = 'myPhone'
    DEFAULT_COUNTRY_CODE = '1'


class ProductionConfig(Config):
    SQLALCHEMY_DATABASE_URI = _database_url(None)
    VERIFICATION_BACKEND = 'twilio'
    SESSION_COOKIE_SECURE = _env_flag('SESSION_COOKIE_SECURE', 'True')

    @classmethod
    def validate(cls):
        if not cls.SQLALCHEMY_DATABASE_URI:
            raise RuntimeError("DATABASE_URL must be set in production")
        if not cls.JWT_SECRET_KEY or cls.JWT_SECRET_KEY == 'dev-secret':
            raise RuntimeError("JWT_SECRET_KEY must be set to a real secret in production")


config_by_name = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
}
