from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Discord notifications (empty webhook disables the stage)
    DISCORD_WEBHOOK: str = ""
    DISCORD_ONLY_ON_ERROR: bool = False
    DISCORD_ATTACH_OUTPUT: bool = False
    DISCORD_TIMEOUT_SECONDS: float = 30.0


class NotifierConfig(BaseModel):
    """Per-notifier settings, also accepted under the job-config keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    webhook_url: str = Field(default="", alias="discord-webhook")
    only_on_error: bool = Field(default=False, alias="discord-only-on-error")
    attach_output: bool = Field(default=False, alias="discord-attach-output")
    timeout_seconds: float = Field(default=30.0, gt=0)

    @classmethod
    def from_settings(cls, s: Settings) -> "NotifierConfig":
        return cls(
            webhook_url=s.DISCORD_WEBHOOK,
            only_on_error=s.DISCORD_ONLY_ON_ERROR,
            attach_output=s.DISCORD_ATTACH_OUTPUT,
            timeout_seconds=s.DISCORD_TIMEOUT_SECONDS,
        )

    def is_empty(self) -> bool:
        return not self.webhook_url.strip()


settings = Settings()
