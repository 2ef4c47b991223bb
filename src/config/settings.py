import logging
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.common.links import is_valid_url

DEFAULT_FEED_URL = "https://maxliesegang.github.io/stadt-karlsruhe-syndication/feed.atom"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Source
    source_url: str = "https://www.karlsruhe.de/aktuelles"
    base_url: str = "https://www.karlsruhe.de"

    # Feed metadata
    feed_title: str = "Stadt Karlsruhe - Aktuelle Meldungen"
    feed_description: str = "Offizielle Nachrichten der Stadt Karlsruhe"
    feed_language: str = "de"
    feed_url: str | None = None
    feed_copyright: str = "Stadt Karlsruhe"
    github_username: str | None = None
    github_repository: str | None = None

    # Output
    output_file: Path = Path("docs/feed.atom")
    tracking_file: Path = Path("data/tracking.json")
    max_articles: int = Field(default=100, gt=0)

    # HTTP
    http_max_retries: int = Field(default=3, ge=1)
    http_retry_delay: float = Field(default=1.0, ge=0)
    http_timeout: float = Field(default=30.0, gt=0)
    user_agent: str = DEFAULT_USER_AGENT
    max_concurrency: int = Field(default=5, ge=1)

    # Runtime
    timezone: str = "Europe/Berlin"
    schedule_cron: str = "0 * * * *"
    log_level: str = "INFO"

    @field_validator("source_url", "base_url")
    @classmethod
    def _require_absolute_url(cls, value: str) -> str:
        if not is_valid_url(value) or not value.startswith(("http://", "https://")):
            raise ValueError(f"must be an absolute http(s) URL, got {value!r}")
        return value

    @field_validator("timezone")
    @classmethod
    def _require_known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone {value!r}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {value!r}")
        return level

    @model_validator(mode="after")
    def _derive_feed_url(self) -> "Settings":
        if self.feed_url:
            if not is_valid_url(self.feed_url):
                raise ValueError(f"feed_url must be an absolute URL, got {self.feed_url!r}")
            return self

        owner = self.github_username
        if not owner and self.github_repository:
            owner = self.github_repository.split("/")[0].strip()
        if owner:
            self.feed_url = f"https://{owner}.github.io/stadt-karlsruhe-syndication/feed.atom"
        else:
            self.feed_url = DEFAULT_FEED_URL
        return self

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


settings = Settings()
