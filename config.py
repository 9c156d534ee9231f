from dotenv import load_dotenv
import os

load_dotenv()


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


TRANSACTION_MAX_WAIT = _env_int("TRANSACTION_MAX_WAIT", 10)
TRANSACTION_TIMEOUT = _env_int("TRANSACTION_TIMEOUT", 30)


def engine_options(database_uri: str) -> dict:
    """SQLAlchemy engine options for the given database URI."""
    if not database_uri or not database_uri.startswith("postgres"):
        return {}

    return {
        # Pool settings for managed PostgreSQL that drops idle connections
        'pool_pre_ping': True,
        'pool_recycle': 300,
        'pool_size': 5,
        'max_overflow': 10,
        # Max wait for a connection before a write transaction starts
        'pool_timeout': TRANSACTION_MAX_WAIT,

        'connect_args': {
            'sslmode': os.getenv("DATABASE_SSLMODE", "require"),
            'connect_timeout': 10,
            # Overall bound on any single statement inside a write transaction
            'options': f"-c statement_timeout={TRANSACTION_TIMEOUT * 1000}",
        }
    }


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY")
    SQLALCHEMY_DATABASE_URI = os.getenv("SQLALCHEMY_DATABASE_URI", "sqlite:///blockpress.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = engine_options(SQLALCHEMY_DATABASE_URI)

    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]

    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
    CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
    CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")

    BASE_URL = os.getenv("BASE_URL", "http://localhost:5000")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    SLUG_MAX_ATTEMPTS = _env_int("SLUG_MAX_ATTEMPTS", 100)
    SLUG_COMMIT_RETRIES = _env_int("SLUG_COMMIT_RETRIES", 3)

    ARTICLES_PER_PAGE = _env_int("ARTICLES_PER_PAGE", 10)
    MAX_ARTICLES_PER_PAGE = _env_int("MAX_ARTICLES_PER_PAGE", 100)

    # Raw error text only reaches clients in development
    EXPOSE_ERROR_DETAILS = os.getenv("FLASK_ENV") == "development"


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    CLOUDINARY_CLOUD_NAME = "demo"
    EXPOSE_ERROR_DETAILS = False
