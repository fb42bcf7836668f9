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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./credentialing.db")
    DB_ECHO = bool(data.get("DB_ECHO", False))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    AUTO_CREATE_SCHEMA = bool(data.get("AUTO_CREATE_SCHEMA", 1))

    # Bearer tokens are issued by the external identity provider
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    JWT_AUDIENCE = data.get("JWT_AUDIENCE")
    JWT_ISSUER = data.get("JWT_ISSUER")
    EXTERNAL_SUBJECT_TYPE = data.get("EXTERNAL_SUBJECT_TYPE", "cognito")

    # Activation defaults
    ACTIVATION_ROLE = data.get("ACTIVATION_ROLE", "therapist")
    DEFAULT_TIMEZONE = data.get("DEFAULT_TIMEZONE", "America/New_York")
    DEFAULT_COUNTRY = data.get("DEFAULT_COUNTRY", "US")
    DEFAULT_PHONE_COUNTRY_CODE = data.get("DEFAULT_PHONE_COUNTRY_CODE", "+1")
    DEFAULT_DOCUMENT_EXPIRY = str(data.get("DEFAULT_DOCUMENT_EXPIRY", "2099-12-31"))

    # Organization invites
    INVITE_CODE_PREFIX = data.get("INVITE_CODE_PREFIX", "ORG")
    INVITE_DEFAULT_EXPIRY_DAYS = data.get("INVITE_DEFAULT_EXPIRY_DAYS", 30)
