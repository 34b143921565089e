"""Configuration module for Flask application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_DEBUG', '1') == '1'
    ENV = os.getenv('FLASK_ENV', 'development')
    TESTING = False

    # Session Configuration (Production-safe defaults)
    SESSION_COOKIE_SECURE = os.getenv('SESSION_COOKIE_SECURE', 'false').lower() == 'true'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.getenv('SESSION_COOKIE_SAMESITE', 'Lax')

    # Company scoping header for API clients (session 'company_id' is also accepted)
    COMPANY_HEADER = os.getenv('COMPANY_HEADER', 'X-Company-Id')

    # Database - Support multiple environment variable naming conventions
    # Priority: DATABASE_URL > DB_* > POSTGRES_*
    DATABASE_URL = os.getenv('DATABASE_URL')

    if not DATABASE_URL:
        # Try DB_* variables (Docker style)
        DB_HOST = os.getenv('DB_HOST') or os.getenv('POSTGRES_HOST', 'localhost')
        DB_PORT = os.getenv('DB_PORT') or os.getenv('POSTGRES_PORT', '5432')
        DB_NAME = os.getenv('DB_NAME') or os.getenv('POSTGRES_DB', 'solestock')
        DB_USER = os.getenv('DB_USER') or os.getenv('POSTGRES_USER', 'solestock')
        DB_PASSWORD = os.getenv('DB_PASSWORD') or os.getenv('POSTGRES_PASSWORD', 'solestock')

        DATABASE_URL = (
            f"postgresql://{DB_USER}:{DB_PASSWORD}"
            f"@{DB_HOST}:{DB_PORT}/{DB_NAME}"
        )

    # SQLAlchemy
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_ECHO = os.getenv('SQLALCHEMY_ECHO', 'false').lower() == 'true'

    # Document numbering: prefix and zero-padded width per document type
    ORDER_NUMBER_PREFIX = os.getenv('ORDER_NUMBER_PREFIX', 'SO')
    ORDER_NUMBER_WIDTH = int(os.getenv('ORDER_NUMBER_WIDTH', '5'))
    INVOICE_NUMBER_PREFIX = os.getenv('INVOICE_NUMBER_PREFIX', 'INV')
    INVOICE_NUMBER_WIDTH = int(os.getenv('INVOICE_NUMBER_WIDTH', '5'))
    RETURN_NOTE_NUMBER_PREFIX = os.getenv('RETURN_NOTE_NUMBER_PREFIX', 'RN')
    RETURN_NOTE_NUMBER_WIDTH = int(os.getenv('RETURN_NOTE_NUMBER_WIDTH', '4'))
    JOURNAL_NUMBER_PREFIX = os.getenv('JOURNAL_NUMBER_PREFIX', 'JE')
    JOURNAL_NUMBER_WIDTH = int(os.getenv('JOURNAL_NUMBER_WIDTH', '3'))

    # Redis Cache Configuration
    # Shared cache layer for reference data (items/colors) read by every editor
    REDIS_URL = os.getenv('REDIS_URL', 'redis://redis:6379/0')
    CACHE_ENABLED = os.getenv('CACHE_ENABLED', 'true').lower() == 'true'
    CACHE_DEFAULT_TTL = int(os.getenv('CACHE_DEFAULT_TTL', '60'))  # seconds
    CACHE_ITEMS_TTL = int(os.getenv('CACHE_ITEMS_TTL', '300'))
    CACHE_KEY_PREFIX = os.getenv('CACHE_KEY_PREFIX', 'solestock')


class TestConfig(Config):
    """Configuration used by the test suite (in-memory SQLite, no Redis)."""

    TESTING = True
    DEBUG = False
    ENV = 'testing'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ECHO = False
    CACHE_ENABLED = False
