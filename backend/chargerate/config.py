"""Application configuration from environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_BACKEND_DIR = Path(__file__).resolve().parent.parent
_ENV_FILE = _BACKEND_DIR / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = "INFO"
    environment: str = "development"
    database_url: str = ""

    # Fair Work Modern Awards Pay Database
    fairwork_api_url: str = "https://api.fwc.gov.au/api/v1"
    fairwork_api_key: str = ""
    # Secured endpoint that hands out the API key when it is not set directly
    fairwork_key_endpoint: str = ""
    fairwork_key_endpoint_token: str = ""
    fairwork_timeout_seconds: float = 15.0
    rate_cache_ttl_seconds: float = 24 * 60 * 60
    # Skip the API for this long after a failed call for the same award/year
    fairwork_failure_backoff_seconds: float = 60.0

    # Used when no award can be determined for an apprentice
    default_pay_rate: float = 25.00
    quote_validity_days: int = 30
    # Stamped as approver/creator until authentication is wired in
    system_user_id: int = 1


settings = Settings()
