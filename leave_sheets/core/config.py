import os
import logging
from pydantic import BaseModel, Field
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


def _unescape_private_key(value: Optional[str]) -> Optional[str]:
    # Keys pasted into .env files usually carry literal "\n" sequences
    if value is None:
        return None
    return value.replace("\\n", "\n")


class SheetsSettings(BaseModel):
    service_account_email: Optional[str] = Field(default=os.getenv("GOOGLE_SERVICE_ACCOUNT_EMAIL"))
    private_key: Optional[str] = Field(default=_unescape_private_key(os.getenv("GOOGLE_PRIVATE_KEY")))
    spreadsheet_id: Optional[str] = Field(default=os.getenv("GOOGLE_SHEET_ID"))
    backend: str = Field(default=os.getenv("SHEETS_BACKEND", "google").strip().lower())

    # Retry-with-backoff around every backend call
    max_retries: int = int(os.getenv("SHEETS_MAX_RETRIES", "3"))
    retry_base_delay: float = float(os.getenv("SHEETS_RETRY_BASE_DELAY", "0.1"))

    # Lifetime of the memoized authenticated client
    client_cache_seconds: float = float(os.getenv("SHEETS_CLIENT_CACHE_SECONDS", "30"))


class Config(BaseModel):
    app_name: str = "Leave Sheets"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"
    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"

    sheets: SheetsSettings = SheetsSettings()

    # Bootstrap
    auto_initialize_sheets: bool = os.getenv("AUTO_INITIALIZE_SHEETS", "true").lower() == "true"
    default_admin_password: str = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")

    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://127.0.0.1:3000",
            ).split(",")
            if o.strip()
        ]
    )

settings = Config()

# --- Startup Validation for Production ---
_logger = logging.getLogger(__name__)
if settings.environment not in ("development", "testing"):
    if settings.default_admin_password == "admin123":
        raise RuntimeError(
            "FATAL: DEFAULT_ADMIN_PASSWORD must be set for non-development environments. "
            "Set it as an environment variable."
        )
else:
    if settings.default_admin_password == "admin123":
        _logger.warning("Using default admin password; only acceptable in development.")
