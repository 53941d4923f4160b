"""
Discord middleware: report the final status of every job execution to a webhook.
"""

from jobnotify.config import NotifierConfig
from jobnotify.core.context import Context, Middleware
from jobnotify.discord.client import DiscordClient
from jobnotify.discord.message import build_message
from jobnotify.output.base import SendResult
from jobnotify.output.discord import send_discord


def new_discord(config: NotifierConfig, client: DiscordClient | None = None) -> "DiscordMiddleware | None":
    """Return a Discord middleware, or None when no webhook is configured."""
    if config.is_empty():
        return None
    return DiscordMiddleware(config, client=client)


class DiscordMiddleware(Middleware):
    def __init__(self, config: NotifierConfig, client: DiscordClient | None = None):
        self.config = config
        self._client = client or DiscordClient(timeout=config.timeout_seconds)

    def continue_on_stop(self) -> bool:
        # Always report the final status, even after an earlier stage stopped the run.
        return True

    async def run(self, ctx: Context) -> None:
        """Run the rest of the chain, stop the execution and notify.

        The error of the wrapped stage is re-raised unchanged.
        """
        try:
            await ctx.next()
        except Exception as e:
            await self._finish(ctx, e)
            raise
        await self._finish(ctx, None)

    async def shutdown(self) -> None:
        await self._client.shutdown()

    async def _finish(self, ctx: Context, error: Exception | None) -> SendResult | None:
        ctx.stop(error)
        if ctx.execution.failed or not self.config.only_on_error:
            return await self.push_message(ctx)
        return None

    async def push_message(self, ctx: Context) -> SendResult:
        """Build and deliver the status message for the stopped execution."""
        msg = build_message(ctx.execution, ctx.job.name, self.config)
        return await send_discord(
            self._client,
            self.config.webhook_url,
            msg,
            stdout=ctx.execution.stdout,
            stderr=ctx.execution.stderr,
            log=ctx.logger,
        )
