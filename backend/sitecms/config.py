import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class BaseConfig:
    ENV_NAME = "development"
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_DATABASE_URI = None

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Connection gateway
    DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
    DB_RETRY_ATTEMPTS = int(os.getenv("DB_RETRY_ATTEMPTS", "3"))
    DB_RETRY_BASE_DELAY = float(os.getenv("DB_RETRY_BASE_DELAY", "0.5"))

    # Theme fallback
    THEMES_DIR = os.getenv("THEMES_DIR") or os.path.join(BASE_DIR, "themes")
    DEMO_TENANT_ID = os.getenv("DEMO_TENANT_ID", "demo")

    # Translation pipeline
    TRANSLATION_API_URL = os.getenv(
        "TRANSLATION_API_URL",
        "https://translation.googleapis.com/language/translate/v2",
    )
    GOOGLE_TRANSLATE_API_KEY = os.getenv("GOOGLE_TRANSLATE_API_KEY")
    TRANSLATION_TIMEOUT = float(os.getenv("TRANSLATION_TIMEOUT", "60"))
    TRANSLATION_BATCH_SIZE = int(os.getenv("TRANSLATION_BATCH_SIZE", "5"))
    TRANSLATION_BATCH_DELAY = float(os.getenv("TRANSLATION_BATCH_DELAY", "0.2"))
    TRANSLATION_MAX_CHUNK_BYTES = int(os.getenv("TRANSLATION_MAX_CHUNK_BYTES", "4500"))
    TRANSLATION_MAX_RETRIES = int(os.getenv("TRANSLATION_MAX_RETRIES", "3"))
    TRANSLATION_BACKOFF_BASE = float(os.getenv("TRANSLATION_BACKOFF_BASE", "1"))
    TRANSLATION_BACKOFF_CAP = float(os.getenv("TRANSLATION_BACKOFF_CAP", "10"))
    TRANSLATION_HTTP_TRANSPORT = None

    # Background jobs (Celery)
    CELERY = {
        "broker_url": os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0"),
        "result_backend": os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/1"),
        "task_ignore_result": False,
        "task_track_started": True,
        "result_extended": True,
        "result_expires": 24 * 3600,
        "task_acks_late": True,
        "task_reject_on_worker_lost": True,
        "worker_prefetch_multiplier": 1,
        "task_time_limit": 600,
        "task_default_queue": "default",
        # One translation worker process keeps translation jobs sequential
        "task_routes": {"sitecms.translation.*": {"queue": "translation"}},
        "task_always_eager": _env_bool("CELERY_TASK_ALWAYS_EAGER", False),
        "task_store_eager_result": True,
    }


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI")


class ProductionConfig(BaseConfig):
    ENV_NAME = "production"
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")


class TestingConfig(BaseConfig):
    ENV_NAME = "testing"
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "testing-jwt-secret-key-that-is-long-enough"
    GOOGLE_TRANSLATE_API_KEY = "test-key"
    DB_RETRY_BASE_DELAY = 0
    TRANSLATION_BATCH_DELAY = 0
    TRANSLATION_BACKOFF_BASE = 0
    TRANSLATION_BACKOFF_CAP = 0
    CELERY = {
        **BaseConfig.CELERY,
        "broker_url": "memory://",
        "result_backend": "cache+memory://",
        "task_always_eager": True,
        "task_eager_propagates": False,
    }


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
