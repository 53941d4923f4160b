import pytest
import structlog
from pydantic import ValidationError

from jobnotify.config import NotifierConfig, Settings
from jobnotify.main import build_middlewares, configure_logging, shutdown
from jobnotify.middleware.discord import DiscordMiddleware
from tests.conftest import WEBHOOK_URL


class TestNotifierConfig:
    def test_job_config_aliases(self):
        config = NotifierConfig.model_validate({
            "discord-webhook": WEBHOOK_URL,
            "discord-only-on-error": True,
            "discord-attach-output": True,
        })

        assert config.webhook_url == WEBHOOK_URL
        assert config.only_on_error is True
        assert config.attach_output is True

    def test_frozen(self, config):
        with pytest.raises(ValidationError):
            config.only_on_error = True

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            NotifierConfig(webhook_url=WEBHOOK_URL, timeout_seconds=0)

    def test_from_settings(self):
        s = Settings(
            DISCORD_WEBHOOK=WEBHOOK_URL,
            DISCORD_ONLY_ON_ERROR=True,
            DISCORD_TIMEOUT_SECONDS=3,
        )

        config = NotifierConfig.from_settings(s)

        assert config.webhook_url == WEBHOOK_URL
        assert config.only_on_error is True
        assert config.attach_output is False
        assert config.timeout_seconds == 3

    def test_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("DISCORD_WEBHOOK", WEBHOOK_URL)
        monkeypatch.setenv("DISCORD_ATTACH_OUTPUT", "true")

        s = Settings()

        assert s.DISCORD_WEBHOOK == WEBHOOK_URL
        assert s.DISCORD_ATTACH_OUTPUT is True


class TestWiring:
    @pytest.mark.asyncio
    async def test_build_middlewares_without_webhook(self):
        assert build_middlewares(Settings(DISCORD_WEBHOOK="")) == []

    @pytest.mark.asyncio
    async def test_build_middlewares_with_webhook(self):
        middlewares = build_middlewares(Settings(DISCORD_WEBHOOK=WEBHOOK_URL))

        assert len(middlewares) == 1
        assert isinstance(middlewares[0], DiscordMiddleware)
        await shutdown(middlewares)

    def test_configure_logging(self):
        try:
            configure_logging(Settings(APP_ENV="production", LOG_LEVEL="warning"))
            assert structlog.is_configured()
        finally:
            structlog.reset_defaults()
