"""
Shell command adapter — run real processes and capture their outcome.

Commands run without a shell, from an argv list. Captured invocations
collect stdout; uncaptured ones inherit the terminal so clone and build
progress is visible to the user.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time

from darling_installer.adapters.base import ProcessAdapter
from darling_installer.core.models.action import Invocation, Receipt

logger = logging.getLogger(__name__)


class ShellCommandAdapter(ProcessAdapter):
    """Execute commands with ``subprocess.run`` and wait for them.

    No timeout is applied: clone and build take as long as they take.
    """

    @property
    def name(self) -> str:
        return "shell"

    def which(self, command: str) -> str | None:
        return shutil.which(command)

    def run(self, invocation: Invocation) -> Receipt:
        command = invocation.command_line

        env = None
        if invocation.env:
            env = os.environ.copy()
            env.update(invocation.env)

        logger.debug("Executing: %s (cwd=%s)", command, invocation.cwd)
        start = time.monotonic()

        try:
            result = subprocess.run(
                invocation.argv,
                cwd=invocation.cwd,
                env=env,
                capture_output=invocation.capture,
                text=True,
            )
        except (OSError, ValueError) as e:
            logger.debug("Could not start %s: %s", command, e)
            return Receipt.not_started(
                command=command,
                error=f"Could not start {invocation.argv[0]}: {e}",
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = result.stdout if invocation.capture else None
        stderr = (result.stderr or "").strip() if invocation.capture else ""

        if result.returncode == 0:
            return Receipt.success(
                command=command,
                output=output,
                duration_ms=elapsed_ms,
                metadata={"stderr": stderr} if stderr else {},
            )

        logger.debug("%s exited with code %d", command, result.returncode)
        return Receipt.failure(
            command=command,
            exit_status=result.returncode,
            error=stderr or f"Command exited with code {result.returncode}",
            output=output,
            duration_ms=elapsed_ms,
        )
