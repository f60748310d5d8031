import os
from datetime import timedelta


def _env_flag(name, default=True):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() not in {'0', 'false', 'no', 'off'}


class BaseConfig:
    SECRET_KEY = os.environ.get("SECRET_KEY")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    PERMANENT_SESSION_LIFETIME = timedelta(days=int(os.environ.get('REMEMBER_ME_DAYS', 14)))

    # Password rules enforced by the account store on registration.
    PASSWORD_MIN_LENGTH = int(os.environ.get('PASSWORD_MIN_LENGTH', 4))
    PASSWORD_REQUIRE_DIGIT = _env_flag('PASSWORD_REQUIRE_DIGIT')
    PASSWORD_REQUIRE_LOWERCASE = _env_flag('PASSWORD_REQUIRE_LOWERCASE')
    PASSWORD_REQUIRE_UPPERCASE = _env_flag('PASSWORD_REQUIRE_UPPERCASE')
    PASSWORD_REQUIRE_NON_ALPHANUMERIC = _env_flag('PASSWORD_REQUIRE_NON_ALPHANUMERIC')

class DevelopmentConfig(BaseConfig):
    SQLALCHEMY_DATABASE_URI = 'sqlite:///database.sqlite'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')

class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = 'testing-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    WTF_CSRF_ENABLED = False

class ProductionConfig(BaseConfig):
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///database.sqlite')
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
