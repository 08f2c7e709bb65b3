"""Configuration module for Flask application."""
import os
from decimal import Decimal
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

    # Session Configuration (the sale draft lives in the session cookie)
    SESSION_COOKIE_SECURE = os.getenv('SESSION_COOKIE_SECURE', 'false').lower() == 'true'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.getenv('SESSION_COOKIE_SAMESITE', 'Lax')
    PERMANENT_SESSION_LIFETIME = 86400  # 24 hours

    # The POS is a JSON API consumed by the terminal front end
    WTF_CSRF_ENABLED = os.getenv('WTF_CSRF_ENABLED', 'false').lower() == 'true'

    # Database - Support multiple environment variable naming conventions
    # Priority: DATABASE_URL > DB_* > POSTGRES_*
    DATABASE_URL = os.getenv('DATABASE_URL')

    if not DATABASE_URL:
        # Try DB_* variables (Docker style)
        DB_HOST = os.getenv('DB_HOST') or os.getenv('POSTGRES_HOST', 'localhost')
        DB_PORT = os.getenv('DB_PORT') or os.getenv('POSTGRES_PORT', '5432')
        DB_NAME = os.getenv('DB_NAME') or os.getenv('POSTGRES_DB', 'kegpos')
        DB_USER = os.getenv('DB_USER') or os.getenv('POSTGRES_USER', 'kegpos')
        DB_PASSWORD = os.getenv('DB_PASSWORD') or os.getenv('POSTGRES_PASSWORD', 'kegpos')

        DATABASE_URL = (
            f"postgresql://{DB_USER}:{DB_PASSWORD}"
            f"@{DB_HOST}:{DB_PORT}/{DB_NAME}"
        )

    # SQLAlchemy
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_ECHO = os.getenv('SQLALCHEMY_ECHO', 'false').lower() == 'true'

    # Liquid units
    KEG_CAPACITY_LITERS = Decimal(os.getenv('KEG_CAPACITY_LITERS', '25'))
    KEGS_PER_DRUM = int(os.getenv('KEGS_PER_DRUM', '9'))

    # Stock status thresholds as (low, medium); above medium is "high"
    STOCK_THRESHOLDS_LITERS = (
        Decimal(os.getenv('STOCK_LOW_LITERS', '500')),
        Decimal(os.getenv('STOCK_MEDIUM_LITERS', '1500')),
    )
    STOCK_THRESHOLDS_DRUMS = (
        int(os.getenv('STOCK_LOW_DRUMS', '10')),
        int(os.getenv('STOCK_MEDIUM_DRUMS', '30')),
    )
    STOCK_THRESHOLDS_KEGS = (
        int(os.getenv('STOCK_LOW_KEGS', '20')),
        int(os.getenv('STOCK_MEDIUM_KEGS', '50')),
    )

    # Sales
    DEFAULT_SALE_TYPE = os.getenv('DEFAULT_SALE_TYPE', 'retail')

    # Error tracking
    SENTRY_DSN = os.getenv('SENTRY_DSN')


class TestingConfig(Config):
    """Configuration used by the test suite (in-memory SQLite)."""

    TESTING = True
    DEBUG = False
    ENV = 'testing'
    SECRET_KEY = 'test-secret-key'
    WTF_CSRF_ENABLED = False
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ECHO = False
    SENTRY_DSN = None
