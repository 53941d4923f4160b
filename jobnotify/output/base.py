from dataclasses import dataclass


@dataclass
class SendResult:
    channel: str  # e.g. "discord"
    success: bool
    target: str  # webhook URL
    status_code: int | None = None
    error: str | None = None
