"""
Discord message construction from a finished execution.

Pure functions only: no network and no clock reads, so the same execution
always yields the same message.
"""

from jobnotify.config import NotifierConfig
from jobnotify.core.context import Execution, Outcome
from jobnotify.core.duration import format_duration
from jobnotify.schemas.discord import Attachment, DiscordMessage, Embed

COLOR_SKIPPED = 0x555555
COLOR_FAILED = 0xFF0000
COLOR_SUCCEEDED = 0x00FF00

ATTACHMENT_TIME_FORMAT = "%Y%m%d_%H%M%S"


def build_message(execution: Execution, job_name: str, config: NotifierConfig) -> DiscordMessage:
    """Build the status message for one finished execution.

    Args:
        execution: Stopped execution record.
        job_name: Display name of the job.
        config: Notifier settings; only ``attach_output`` matters here.
    """
    msg = DiscordMessage()
    outcome = execution.outcome

    if outcome is Outcome.SKIPPED:
        msg.embeds.append(Embed(
            title="Job Skipped",
            description=f"Job `{job_name}` was skipped",
            color=COLOR_SKIPPED,
        ))
        return msg

    took = format_duration(execution.duration)
    if outcome is Outcome.FAILED:
        msg.embeds.append(Embed(
            title="Job Failed",
            description=f"Job `{job_name}` failed, took `{took}`",
            color=COLOR_FAILED,
        ))
    else:
        msg.embeds.append(Embed(
            title="Job Succeeded",
            description=f"Job `{job_name}` succeeded, took `{took}`",
            color=COLOR_SUCCEEDED,
        ))

    if config.attach_output:
        stamp = execution.date.strftime(ATTACHMENT_TIME_FORMAT) if execution.date else "00000000_000000"
        name = f"{stamp}_{job_name}"
        msg.attachments.append(Attachment(
            id=0,
            filename=f"{name}.stdout.log",
            description="Standard out log for the job.",
        ))
        msg.attachments.append(Attachment(
            id=1,
            filename=f"{name}.stderr.log",
            description="Standard error log for the job.",
        ))

    return msg
