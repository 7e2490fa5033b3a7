# freelancy_api/core/config.py
import os
from urllib.parse import quote_plus

from dotenv import load_dotenv


FIREBASE_ISSUER_PREFIX = "https://securetoken.google.com/"
FIREBASE_JWKS_URL = "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com"


def str_to_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


class Settings:
    def __init__(self) -> None:
        # Only load .env for local/dev. In prod, env vars come from the service config.
        self.ENV = os.getenv("ENV", "dev").strip().lower()  # dev | prod
        if self.ENV != "prod":
            load_dotenv()

        # ----------------------------
        # Server
        # ----------------------------
        self.HOST = os.getenv("HOST", "0.0.0.0")
        self.PORT = int(os.getenv("PORT", "3000"))
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()

        # ----------------------------
        # Database
        # ----------------------------
        # DATABASE_URL wins; otherwise a PostgreSQL URL is assembled from DB_* parts.
        self.DATABASE_URL = os.getenv("DATABASE_URL", "").strip()
        self.DB_HOST = os.getenv("DB_HOST", "")
        self.DB_PORT = os.getenv("DB_PORT", "5432")
        self.DB_NAME = os.getenv("DB_NAME", "")
        self.DB_USER = os.getenv("DB_USER", "")
        self.DB_PASS = os.getenv("DB_PASS", "")
        self.DB_SSLMODE = os.getenv("DB_SSLMODE", "require").strip().lower()

        # ----------------------------
        # CORS
        # ----------------------------
        # Empty means "allow any origin".
        self.CORS_ORIGINS = parse_csv(os.getenv("CORS_ORIGINS"))

        # ----------------------------
        # Identity provider (Firebase)
        # ----------------------------
        # Base64-encoded service account JSON.
        self.FIREBASE_SERVICE_KEY = os.getenv("FIREBASE_SERVICE_KEY", "").strip()
        self.FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "").strip()
        self.FIREBASE_JWKS_URL = os.getenv("FIREBASE_JWKS_URL", FIREBASE_JWKS_URL).strip()
        self.FIREBASE_JWKS_CACHE_SECONDS = int(os.getenv("FIREBASE_JWKS_CACHE_SECONDS", "3600"))
        self.FIREBASE_JWKS_TIMEOUT_SECONDS = float(os.getenv("FIREBASE_JWKS_TIMEOUT_SECONDS", "10"))

        # ----------------------------
        # Ownership rules
        # ----------------------------
        # false restores the legacy behaviour where any signed-in caller may delete any job.
        self.JOB_DELETE_REQUIRES_OWNER = str_to_bool(os.getenv("JOB_DELETE_REQUIRES_OWNER"), default=True)

        self._validate_prod()

    def _validate_prod(self) -> None:
        if self.ENV != "prod":
            return

        missing: list[str] = []

        if not self.FIREBASE_SERVICE_KEY:
            missing.append("FIREBASE_SERVICE_KEY")
        if not self.DATABASE_URL:
            if not self.DB_HOST:
                missing.append("DB_HOST")
            if not self.DB_NAME:
                missing.append("DB_NAME")
            if not self.DB_USER:
                missing.append("DB_USER")
            if not self.DB_PASS:
                missing.append("DB_PASS")
            if self.DB_SSLMODE != "require":
                raise RuntimeError("DB_SSLMODE must be 'require' in prod")

        if missing:
            raise RuntimeError(f"Missing required prod env vars: {', '.join(missing)}")

    @property
    def is_prod(self) -> bool:
        return self.ENV == "prod"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if not self.DB_HOST:
            return "sqlite:///./freelancy.db"
        encoded_password = quote_plus(self.DB_PASS)
        return (
            f"postgresql+psycopg2://{self.DB_USER}:{encoded_password}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            f"?sslmode={self.DB_SSLMODE}"
        )


settings = Settings()
