import os

from dotenv import load_dotenv

load_dotenv()


def _normalize_database_url(url: str) -> str:
    # Render/Heroku sometimes provide postgres:// which SQLAlchemy expects as postgresql://
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def _env_bool(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


class Config:
    # Base directory of the backend (one level above this `biotrack` package)
    BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    INSTANCE_DIR = os.path.join(BACKEND_DIR, "instance")

    ENV_NAME = (os.getenv("BIOTRACK_ENV", "dev") or "dev").strip().lower()
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")

    _default_sqlite_path = os.path.join(INSTANCE_DIR, "biotrack.db").replace("\\", "/")
    _db_url = os.getenv("SQLALCHEMY_DATABASE_URI") or os.getenv("DATABASE_URL") or f"sqlite:///{_default_sqlite_path}"
    SQLALCHEMY_DATABASE_URI = _normalize_database_url(_db_url)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # CORS: comma-separated origins for web builds
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")

    MAIL_SERVER = os.getenv("MAIL_SERVER", "localhost")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "25"))
    MAIL_USE_TLS = _env_bool("MAIL_USE_TLS", False)
    MAIL_USERNAME = os.getenv("MAIL_USERNAME")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", "updates@biotrack.local")

    # Daily digest. The admin-only gate was used while the digest was being trialled.
    DIGEST_ADMIN_ONLY = _env_bool("DIGEST_ADMIN_ONLY", True)
    DIGEST_WINDOW_HOURS = int(os.getenv("DIGEST_WINDOW_HOURS", "24"))

    UPDATE_RETENTION_DAYS = int(os.getenv("UPDATE_RETENTION_DAYS", "365"))
    UPDATES_PAGE_SIZE = int(os.getenv("UPDATES_PAGE_SIZE", "50"))

    GLOBI_HREF_NAME = os.getenv("GLOBI_HREF_NAME", "GloBI (EOL)")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key-0123456789"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    MAIL_SUPPRESS_SEND = True
    DIGEST_ADMIN_ONLY = False
