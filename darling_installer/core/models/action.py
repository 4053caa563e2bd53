"""
Invocation and Receipt models — the process execution contract.

Invocations represent requested external commands. Receipts represent
their results. This is the I/O contract between the installer core and
the process adapters: the core sends Invocations, adapters return
Receipts. Never exceptions.
"""

from __future__ import annotations

import shlex
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Invocation(BaseModel):
    """A request to run one external command.

    ``capture`` collects stdout into the receipt; otherwise the child
    inherits the terminal so long-running tools (clone, build) show
    their own progress.
    """

    argv: list[str] = Field(min_length=1)
    cwd: str | None = None
    capture: bool = False
    env: dict[str, str] = Field(default_factory=dict)  # overrides on top of os.environ

    @property
    def command_line(self) -> str:
        """Shell-quoted rendering, used for logs and mock matching."""
        return shlex.join(self.argv)


class Receipt(BaseModel):
    """Result of running an Invocation.

    ``not_started`` means the process could not be spawned at all
    (missing executable, bad cwd). ``failed`` means it ran and exited
    non-zero. Adapters never raise; failures are captured here.
    """

    command: str
    status: Literal["ok", "failed", "not_started"] = "ok"

    exit_status: int | None = None
    output: str | None = None        # captured stdout, None when not captured
    error: str | None = None

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the command ran and exited zero."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the command ran and exited non-zero."""
        return self.status == "failed"

    @property
    def started(self) -> bool:
        """Whether the process was spawned at all."""
        return self.status != "not_started"

    @classmethod
    def success(
        cls,
        command: str,
        output: str | None = None,
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(
            command=command,
            status="ok",
            exit_status=0,
            output=output,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        command: str,
        exit_status: int,
        error: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a receipt for a process that exited non-zero."""
        return cls(
            command=command,
            status="failed",
            exit_status=exit_status,
            error=error or f"Command exited with code {exit_status}",
            **kwargs,
        )

    @classmethod
    def not_started(
        cls,
        command: str,
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a receipt for a process that could not be spawned."""
        return cls(
            command=command,
            status="not_started",
            error=error,
            **kwargs,
        )
