"""
Shared fixtures: fake jobs, a recording webhook transport and a multipart reader.
"""

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from jobnotify.config import NotifierConfig
from jobnotify.core.context import Execution
from jobnotify.discord.client import DiscordClient

WEBHOOK_URL = "https://discord.test/api/webhooks/123/token"


class FakeJob:
    """Job that writes to the execution streams and optionally raises."""

    def __init__(self, name="backup", stdout=b"", stderr=b"", error: Exception | None = None):
        self.name = name
        self.stdout = stdout
        self.stderr = stderr
        self.error = error
        self.runs = 0

    async def run(self, ctx):
        self.runs += 1
        ctx.execution.output_stream.extend(self.stdout)
        ctx.execution.error_stream.extend(self.stderr)
        if self.error:
            raise self.error


class WebhookRecorder:
    """httpx.MockTransport handler that records every request."""

    def __init__(self, status_code: int = 200, exc: Exception | None = None):
        self.status_code = status_code
        self.exc = exc
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc:
            raise self.exc
        return httpx.Response(self.status_code)


def parse_multipart(request: httpx.Request) -> list[tuple[dict[str, str], bytes]]:
    """Split a multipart/form-data request into (headers, body) pairs, in order."""
    boundary = request.headers["content-type"].split("boundary=", 1)[1].encode()
    parts = []
    for chunk in request.content.split(b"--" + boundary)[1:-1]:
        head, _, body = chunk[2:].partition(b"\r\n\r\n")
        headers = dict(line.split(": ", 1) for line in head.decode().split("\r\n"))
        parts.append((headers, body[:-2]))
    return parts


def make_execution(outcome: str = "succeeded", **kwargs) -> Execution:
    execution = Execution(
        date=datetime(2024, 3, 9, 14, 5, 7, tzinfo=timezone.utc),
        duration=timedelta(minutes=1, seconds=30),
        failed=outcome == "failed",
        skipped=outcome == "skipped",
        **kwargs,
    )
    return execution


@pytest.fixture
def recorder():
    return WebhookRecorder()


@pytest.fixture
def make_client():
    def _make(rec: WebhookRecorder) -> DiscordClient:
        return DiscordClient(timeout=5, transport=httpx.MockTransport(rec))
    return _make


@pytest.fixture
def config():
    return NotifierConfig(webhook_url=WEBHOOK_URL)
