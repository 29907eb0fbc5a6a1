"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load environment variables from config.env next to this module
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


class Config:
    """Base configuration class with all settings."""

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = _env_flag('DEBUG', 'False')
    TESTING = False

    # Server Settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 8000))
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    # Authentication Settings
    JWT_SECRET = os.getenv('JWT_SECRET', SECRET_KEY)
    JWT_EXPIRATION_DAYS = int(os.getenv('JWT_EXPIRATION_DAYS', 7))
    BCRYPT_ROUNDS = int(os.getenv('BCRYPT_ROUNDS', 12))

    # Round Settings
    ROUND_TIME_LIMIT_SECONDS = int(os.getenv('ROUND_TIME_LIMIT_SECONDS', 180))
    TIMER_TICK_MS = int(os.getenv('TIMER_TICK_MS', 1000))
    ENABLE_ROUND_TIMER = _env_flag('ENABLE_ROUND_TIMER', 'True')

    # Room Settings
    MIN_PLAYERS = int(os.getenv('MIN_PLAYERS', 2))
    RECENT_WORD_HISTORY = int(os.getenv('RECENT_WORD_HISTORY', 10))
    ALLOW_LATE_JOIN = _env_flag('ALLOW_LATE_JOIN', 'True')
    STRICT_DICTIONARY = _env_flag('STRICT_DICTIONARY', 'False')

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')
    LOG_TO_FILE = _env_flag('LOG_TO_FILE', 'True')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    SECRET_KEY = 'test-secret'
    JWT_SECRET = 'test-jwt-secret'
    BCRYPT_ROUNDS = 4
    ENABLE_ROUND_TIMER = False
    LOG_TO_FILE = False


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
