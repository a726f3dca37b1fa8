from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from ifsc_sdk.client import DEFAULT_BASE_URL


class Settings(BaseSettings):
    BASE_URL: str = DEFAULT_BASE_URL
    POLL_INTERVAL_MS: int = 1000
    REQUEST_TIMEOUT: float = 30.0
    AUTHENTICATE: bool = False
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="IFSC_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def poll_interval(self) -> float:
        """Poll interval in seconds."""
        return self.POLL_INTERVAL_MS / 1000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
