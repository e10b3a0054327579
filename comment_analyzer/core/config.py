from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://commentanalyzer.googleapis.com/v1alpha1/comments:analyze"


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PERSPECTIVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Remote API
    api_key: str = Field(min_length=1)
    api_url: str = DEFAULT_API_URL
    request_timeout: float = Field(30.0, gt=0)

    # Channels
    request_buffer_size: int = Field(16, ge=1)
    response_buffer_size: int = Field(16, ge=1)

    # Dispatch
    maximum_queue_size: int = Field(128, ge=1)  # per priority tier
    tick_rate: int = Field(1100, ge=1000)  # milliseconds between releases
    shutdown_timeout: float = Field(1.0, ge=0)  # grace before the worker is aborted

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def tick_interval(self) -> float:
        """Pacer interval in seconds."""
        return self.tick_rate / 1000
