"""
Job pipeline contract: execution record, job context and middleware chaining.

Flow:
1. Runner builds a Context with the job and its middlewares
2. ctx.start() marks the execution as running
3. Each middleware calls ctx.next() to hand over to the next stage
4. After the last middleware the job itself runs (once)
5. ctx.stop(error) records the final outcome
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Protocol

import structlog

from jobnotify.core.duration import format_duration

logger = structlog.get_logger()


class SkippedExecutionError(Exception):
    """Raised by a stage to mark the execution as skipped rather than failed."""

    def __init__(self, reason: str = "execution skipped"):
        self.reason = reason
        super().__init__(reason)


class Outcome(str, Enum):
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    SKIPPED = "Skipped"


@dataclass
class Execution:
    date: datetime | None = None
    duration: timedelta = field(default_factory=timedelta)
    is_running: bool = False
    failed: bool = False
    skipped: bool = False
    error: Exception | None = None
    output_stream: bytearray = field(default_factory=bytearray)
    error_stream: bytearray = field(default_factory=bytearray)

    def start(self) -> None:
        self.is_running = True
        self.date = datetime.now(timezone.utc)

    def stop(self, error: Exception | None) -> None:
        self.is_running = False
        if self.date is not None:
            self.duration = datetime.now(timezone.utc) - self.date

        if isinstance(error, SkippedExecutionError):
            self.skipped = True
        elif error is not None:
            self.failed = True
            self.error = error

    @property
    def outcome(self) -> Outcome:
        if self.skipped:
            return Outcome.SKIPPED
        if self.failed:
            return Outcome.FAILED
        return Outcome.SUCCEEDED

    @property
    def stdout(self) -> bytes:
        return bytes(self.output_stream)

    @property
    def stderr(self) -> bytes:
        return bytes(self.error_stream)


class Job(Protocol):
    name: str

    async def run(self, ctx: "Context") -> None: ...


class Middleware(ABC):
    """A pipeline stage wrapped around job execution."""

    @abstractmethod
    async def run(self, ctx: "Context") -> None:
        """Run the stage. Call ``await ctx.next()`` to continue the chain."""

    def continue_on_stop(self) -> bool:
        """Whether the stage still runs after the execution was stopped."""
        return False


class Context:
    def __init__(self, job: Job, execution: Execution | None = None, middlewares=None, log=None):
        self.job = job
        self.execution = execution or Execution()
        self.logger = log or logger.bind(job=job.name)
        self._middlewares: list[Middleware] = list(middlewares or [])
        self._current = 0
        self._executed = False

    def start(self) -> None:
        self.execution.start()
        self.logger.info("job.started")

    async def next(self) -> None:
        while self._current < len(self._middlewares):
            m = self._middlewares[self._current]
            self._current += 1
            if not self.execution.is_running and not m.continue_on_stop():
                continue
            await m.run(self)
            return

        if not self.execution.is_running or self._executed:
            return

        self._executed = True
        await self.job.run(self)

    def stop(self, error: Exception | None) -> None:
        if not self.execution.is_running:
            return
        self.execution.stop(error)
        self.logger.info(
            "job.stopped",
            outcome=self.execution.outcome.value,
            duration=format_duration(self.execution.duration),
        )


async def run_job(job: Job, middlewares: list[Middleware] | None = None) -> Execution:
    """Drive a job through its middleware chain and return the finished execution.

    Errors raised by the job are recorded on the execution; the runner never raises
    for them, only for cancellation.
    """
    ctx = Context(job, middlewares=middlewares)
    ctx.start()
    try:
        await ctx.next()
    except Exception as e:
        ctx.stop(e)
    else:
        ctx.stop(None)
    return ctx.execution
