"""
Discord webhook client holding one httpx client per notifier.

Handles:
- Simple mode: form-encoded POST with the JSON payload in one field
- Attachment mode: multipart POST with the JSON payload followed by log files
"""

import httpx
import structlog

from jobnotify.config import settings
from jobnotify.schemas.discord import DiscordMessage

logger = structlog.get_logger()


class DiscordClient:
    PAYLOAD_FIELD = "payload_json"

    def __init__(self, timeout: float | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self._timeout = timeout if timeout is not None else settings.DISCORD_TIMEOUT_SECONDS
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    async def initialize(self):
        """Create the httpx client."""
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
            logger.info("discord.initialized", timeout=self._timeout)

    async def shutdown(self):
        """Close httpx client."""
        if self._http:
            await self._http.aclose()
            self._http = None
        logger.info("discord.shutdown")

    async def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            await self.initialize()
        return self._http

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def encode_form(self, msg: DiscordMessage) -> dict[str, str]:
        """Form body for simple mode."""
        return {self.PAYLOAD_FIELD: msg.to_json()}

    def encode_multipart(self, msg: DiscordMessage, stdout: bytes, stderr: bytes) -> list[tuple]:
        """Multipart parts for attachment mode, in wire order.

        Part order is fixed: payload, files[0] (stdout), files[1] (stderr). The
        attachment ids in the payload refer to these positions.
        """
        if len(msg.attachments) < 2:
            raise ValueError("attachment mode needs stdout and stderr descriptors")

        streams = {0: stdout, 1: stderr}
        parts: list[tuple] = [
            (self.PAYLOAD_FIELD, (None, msg.to_json().encode(), "application/json")),
        ]
        for attachment in msg.attachments[:2]:
            parts.append((
                f"files[{attachment.id}]",
                (attachment.filename, streams[attachment.id], "text/plain"),
            ))
        return parts

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def send_form(self, webhook_url: str, msg: DiscordMessage) -> httpx.Response:
        """POST the message as application/x-www-form-urlencoded."""
        data = self.encode_form(msg)
        http = await self._client()
        return await http.post(webhook_url, data=data)

    async def send_multipart(
        self,
        webhook_url: str,
        msg: DiscordMessage,
        stdout: bytes,
        stderr: bytes,
    ) -> httpx.Response:
        """POST the message and both log streams as multipart/form-data."""
        files = self.encode_multipart(msg, stdout, stderr)
        http = await self._client()
        return await http.post(webhook_url, files=files)
