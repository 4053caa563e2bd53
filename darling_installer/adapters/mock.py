"""
Mock adapter — scriptable test double for process execution.

Simulates a host without touching real tools: which commands exist,
what each command prints, which ones fail or cannot start. Responses
are keyed by command-line prefix, so ``"cargo search"`` matches
``cargo search darling-arch``.
"""

from __future__ import annotations

from collections.abc import Callable

from darling_installer.adapters.base import ProcessAdapter
from darling_installer.core.models.action import Invocation, Receipt

RunHook = Callable[[Invocation], None]


class MockAdapter(ProcessAdapter):
    """Universal mock process adapter for testing.

    By default every command succeeds with empty output and nothing is
    installed. Configure with ``set_installed``, ``set_output``,
    ``set_failure``, ``set_unstartable`` and ``on_run``.
    """

    def __init__(
        self,
        adapter_name: str = "mock",
        installed: tuple[str, ...] | list[str] = (),
    ):
        self._name = adapter_name
        self._installed: set[str] = set(installed)
        self._responses: list[tuple[str, Receipt]] = []
        self._hooks: list[tuple[str, RunHook]] = []
        self._call_log: list[Invocation] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[Invocation]:
        """All invocations this mock has received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def commands_run(self) -> list[str]:
        """Command lines of every invocation, in order."""
        return [inv.command_line for inv in self._call_log]

    # ── Configuration ────────────────────────────────────────────

    def set_installed(self, *commands: str) -> None:
        """Mark commands as resolvable on PATH."""
        self._installed.update(commands)

    def set_response(self, prefix: str, receipt: Receipt) -> None:
        """Return ``receipt`` for any command line starting with ``prefix``."""
        self._responses.append((prefix, receipt))

    def set_output(self, prefix: str, output: str) -> None:
        """Succeed with ``output`` as captured stdout."""
        self.set_response(prefix, Receipt.success(command=prefix, output=output))

    def set_failure(self, prefix: str, exit_status: int = 1, error: str = "Mock failure") -> None:
        """Configure matching commands to exit non-zero."""
        self.set_response(
            prefix,
            Receipt.failure(command=prefix, exit_status=exit_status, error=error),
        )

    def set_unstartable(self, prefix: str, error: str = "Mock spawn failure") -> None:
        """Configure matching commands to fail before starting."""
        self.set_response(prefix, Receipt.not_started(command=prefix, error=error))

    def on_run(self, prefix: str, hook: RunHook) -> None:
        """Call ``hook`` with the invocation whenever a matching command runs.

        Used to simulate side effects such as ``git clone`` creating a
        directory.
        """
        self._hooks.append((prefix, hook))

    # ── Adapter interface ────────────────────────────────────────

    def which(self, command: str) -> str | None:
        if command in self._installed:
            return f"/usr/bin/{command}"
        return None

    def run(self, invocation: Invocation) -> Receipt:
        self._call_log.append(invocation)
        command = invocation.command_line

        for prefix, hook in self._hooks:
            if command.startswith(prefix):
                hook(invocation)

        for prefix, receipt in self._responses:
            if command.startswith(prefix):
                if receipt.started and not invocation.capture:
                    return receipt.model_copy(update={"command": command, "output": None})
                return receipt.model_copy(update={"command": command})

        return Receipt.success(
            command=command,
            output="" if invocation.capture else None,
            metadata={"mock": True},
        )
