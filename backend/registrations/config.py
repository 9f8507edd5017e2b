"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (the admin token default is a placeholder)
    - get_settings() is cached (lru_cache): single instance per process
    - dataset_path is the ONLY place the dataset location is defined

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box locally
"""

from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from limits import parse
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Dataset
    dataset_path: Path = Path("data/registrations.xlsx")
    dataset_sheet: str = "Registrations"

    # Admin access (bearer token issued outside this service)
    admin_token: str = "change-me-admin-token"

    # API
    cors_origins: list[str] = ["http://localhost:3000"]
    default_page_limit: int = 20

    # Rate limiting for every /api route (limits notation, per client address)
    rate_limit: str = "100 per 15 minutes"
    rate_limit_enabled: bool = True

    # Exports
    report_timezone: str = "Asia/Kolkata"
    export_filename_prefix: str = "AI4Biz_Students"
    # TrueType fonts for the PDF report (Helvetica when unset)
    report_font_path: Path | None = None
    report_bold_font_path: Path | None = None

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("report_timezone")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {v}") from e
        return v

    @field_validator("rate_limit")
    @classmethod
    def check_rate_limit(cls, v: str) -> str:
        parse(v)
        return v

    @property
    def report_zone(self) -> ZoneInfo:
        return ZoneInfo(self.report_timezone)


@lru_cache
def get_settings() -> Settings:
    return Settings()
