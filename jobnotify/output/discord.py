"""
Discord output: encode a message and deliver it to a webhook.

- message has attachments → multipart mode, any 2xx is success
- otherwise → form mode, only 200 is success

Delivery is best-effort: every failure is logged and reported in the
SendResult, never raised.
"""

import httpx
import structlog

from jobnotify.discord.client import DiscordClient
from jobnotify.output.base import SendResult
from jobnotify.schemas.discord import DiscordMessage

logger = structlog.get_logger()


def _is_success(status_code: int, multipart: bool) -> bool:
    if multipart:
        return 200 <= status_code <= 299
    return status_code == 200


async def send_discord(
    client: DiscordClient,
    webhook_url: str,
    msg: DiscordMessage,
    stdout: bytes = b"",
    stderr: bytes = b"",
    log=None,
) -> SendResult:
    """Send a message to a Discord webhook.

    Args:
        client: Webhook client used for encoding and transport.
        webhook_url: Target webhook URL.
        msg: Message to send; its attachments select the encoding.
        stdout: Captured standard output, sent as files[0] in multipart mode.
        stderr: Captured standard error, sent as files[1] in multipart mode.
        log: Bound logger, defaults to the module logger.
    """
    log = log or logger
    multipart = bool(msg.attachments)

    try:
        if multipart:
            resp = await client.send_multipart(webhook_url, msg, stdout, stderr)
        else:
            resp = await client.send_form(webhook_url, msg)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        log.error("discord.delivery_failed", url=webhook_url, error=repr(e))
        return SendResult(channel="discord", success=False, target=webhook_url, error=str(e))
    except ValueError as e:
        log.error("discord.encode_failed", url=webhook_url, error=str(e))
        return SendResult(channel="discord", success=False, target=webhook_url, error=str(e))

    if not _is_success(resp.status_code, multipart):
        log.error("discord.bad_status", url=webhook_url, status=resp.status_code)
        return SendResult(
            channel="discord",
            success=False,
            target=webhook_url,
            status_code=resp.status_code,
            error=f"unexpected status {resp.status_code}",
        )

    log.info("discord.sent", target=webhook_url[:60], multipart=multipart)
    return SendResult(channel="discord", success=True, target=webhook_url, status_code=resp.status_code)
