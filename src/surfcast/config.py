"""Runtime configuration for surfcast.

Values are read from environment variables prefixed with ``SURFCAST_``
(e.g. ``SURFCAST_DB_PATH``, ``SURFCAST_OPENAI_API_KEY``).
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_DB_PATH = _PROJECT_ROOT / "data" / "cache" / "surfcast.duckdb"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_prefix="SURFCAST_")

    # Storage
    db_path: Path = DEFAULT_DB_PATH

    # Local time for tide days and report checkpoints
    timezone: str = "Asia/Manila"

    # Upstream timeouts (seconds)
    marine_timeout_s: float = 10.0
    tide_timeout_s: float = 15.0
    llm_timeout_s: float = 30.0

    # Credentials
    worldtides_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    llm_max_tokens: int = 300

    # Tide station (General Luna, Siargao)
    tide_lat: float = 9.7836
    tide_lon: float = 126.1578

    # Tide refresh policy
    tide_fetch_days: int = 7
    tide_refetch_after_days: int = 5
    tide_lookahead_days: int = 3
    tide_retention_days: int = 7

    # AI report cache
    report_checkpoint_hours: tuple[int, ...] = (4, 23)
    report_algorithm_version: str = "v2.0_workable_angle"

    # API settings
    api_title: str = "Surfcast API"
    cors_origins: list[str] = ["*"]

    @property
    def tz(self) -> ZoneInfo:
        """Local service timezone."""
        return ZoneInfo(self.timezone)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
