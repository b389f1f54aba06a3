import os


class Config:
    # Secret key for sessions / JWT - REQUIRED outside of testing
    SECRET_KEY = os.environ.get("SECRET_KEY")

    # Database connection; falls back to sqlite in the instance folder
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT Configuration
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)

    TESTING = False
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    API_PREFIX = os.environ.get("API_PREFIX", "/api/v1")
    CORS_ALLOWED_ORIGINS = os.environ.get("CORS_ALLOWED_ORIGINS", "")

    # Billing
    DUE_SOON_DAYS = int(os.environ.get("DUE_SOON_DAYS", 3))
    CURRENCY_SYMBOL = os.environ.get("CURRENCY_SYMBOL", "₹")

    # Scheduled notification triggers; run them from one `flask jobs serve` process
    SCHEDULER_TIMEZONE = os.environ.get("SCHEDULER_TIMEZONE", "Asia/Kolkata")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = "WARNING"
