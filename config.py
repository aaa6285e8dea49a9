import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./conpanion.db")
    DB_AUTO_CREATE = bool(data.get("DB_AUTO_CREATE", True))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_EXPIRE_MINUTES = data.get("JWT_EXPIRE_MINUTES", 60)
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")
    APP_BASE_URL = data.get("APP_BASE_URL", "http://localhost:3000").rstrip("/")
    SECRETS_FILE = data.get("SECRETS_FILE", os.path.join(ROOT_PATH, "secrets.yaml"))

    SCHEDULER_ENABLED = bool(data.get("SCHEDULER_ENABLED", False))
    EMAIL_QUEUE_INTERVAL_MINUTES = data.get("EMAIL_QUEUE_INTERVAL_MINUTES", 5)
    PUSH_QUEUE_INTERVAL_MINUTES = data.get("PUSH_QUEUE_INTERVAL_MINUTES", 2)
    RETRY_INTERVAL_MINUTES = data.get("RETRY_INTERVAL_MINUTES", 30)
    INVITATION_EXPIRY_INTERVAL_MINUTES = data.get(
        "INVITATION_EXPIRY_INTERVAL_MINUTES", 60
    )
    CLEANUP_HOUR = data.get("CLEANUP_HOUR", 2)
    SUBSCRIPTION_CLEANUP_HOUR = data.get("SUBSCRIPTION_CLEANUP_HOUR", 3)

    DELIVERY_TIMEOUT_SECONDS = data.get("DELIVERY_TIMEOUT_SECONDS", 30)
    EMAIL_QUEUE_BATCH_SIZE = data.get("EMAIL_QUEUE_BATCH_SIZE", 100)
    PUSH_QUEUE_BATCH_SIZE = data.get("PUSH_QUEUE_BATCH_SIZE", 50)
