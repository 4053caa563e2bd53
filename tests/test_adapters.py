"""
Tests for process adapters — mock and shell.
"""

import sys
from pathlib import Path

from darling_installer.adapters.mock import MockAdapter
from darling_installer.adapters.shell.command import ShellCommandAdapter
from darling_installer.core.models.action import Invocation

# ── Mock Adapter Tests ───────────────────────────────────────────────


class TestMockAdapter:
    def test_default_success(self):
        mock = MockAdapter()
        receipt = mock.run(Invocation(argv=["git", "status"]))
        assert receipt.ok
        assert mock.call_count == 1
        assert receipt.output is None

    def test_default_captured_output_is_empty(self):
        mock = MockAdapter()
        receipt = mock.run(Invocation(argv=["cargo", "search", "x"], capture=True))
        assert receipt.output == ""

    def test_which(self):
        mock = MockAdapter(installed=("git",))
        assert mock.which("git") == "/usr/bin/git"
        assert mock.which("cargo") is None
        mock.set_installed("cargo")
        assert mock.which("cargo") == "/usr/bin/cargo"

    def test_set_output_matches_prefix(self):
        mock = MockAdapter()
        mock.set_output("cargo search", 'darling-arch = "0.1.0"\n')
        receipt = mock.run(Invocation(argv=["cargo", "search", "darling-arch"], capture=True))
        assert receipt.output == 'darling-arch = "0.1.0"\n'
        assert receipt.command == "cargo search darling-arch"

    def test_set_failure(self):
        mock = MockAdapter()
        mock.set_failure("darling module install", exit_status=2, error="boom")
        receipt = mock.run(Invocation(argv=["darling", "module", "install", "vscode"]))
        assert receipt.failed
        assert receipt.exit_status == 2
        assert receipt.error == "boom"

    def test_set_unstartable(self):
        mock = MockAdapter()
        mock.set_unstartable("git")
        receipt = mock.run(Invocation(argv=["git", "clone", "url"]))
        assert not receipt.started

    def test_first_matching_response_wins(self):
        mock = MockAdapter()
        mock.set_failure("darling module install cargo")
        mock.set_output("darling", "ok")
        assert mock.run(Invocation(argv=["darling", "module", "install", "cargo"])).failed
        assert mock.run(Invocation(argv=["darling", "module", "install", "vscode"])).ok

    def test_hook_runs_before_response(self, tmp_path: Path):
        seen = []
        mock = MockAdapter()
        mock.on_run("git clone", lambda inv: seen.append(inv.cwd))
        mock.run(Invocation(argv=["git", "clone", "url"], cwd=str(tmp_path)))
        mock.run(Invocation(argv=["cargo", "build"]))
        assert seen == [str(tmp_path)]

    def test_commands_run(self):
        mock = MockAdapter()
        mock.run(Invocation(argv=["a"]))
        mock.run(Invocation(argv=["b", "c"]))
        assert mock.commands_run == ["a", "b c"]
        assert mock.call_count == 2


# ── Shell Adapter Tests ──────────────────────────────────────────────


class TestShellCommandAdapter:
    def test_name(self):
        adapter = ShellCommandAdapter()
        assert adapter.name == "shell"
        assert repr(adapter) == "<ShellCommandAdapter name='shell'>"

    def test_which_finds_python(self):
        adapter = ShellCommandAdapter()
        assert adapter.which(sys.executable) is not None

    def test_which_missing_returns_none(self):
        adapter = ShellCommandAdapter()
        assert adapter.which("definitely-not-a-real-command-xyz") is None

    def test_captures_stdout(self):
        adapter = ShellCommandAdapter()
        receipt = adapter.run(
            Invocation(argv=[sys.executable, "-c", "print('hello')"], capture=True)
        )
        assert receipt.ok
        assert receipt.output.strip() == "hello"

    def test_nonzero_exit(self):
        adapter = ShellCommandAdapter()
        receipt = adapter.run(
            Invocation(
                argv=[sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"],
                capture=True,
            )
        )
        assert receipt.failed
        assert receipt.exit_status == 3
        assert receipt.error == "bad"

    def test_missing_executable_not_started(self):
        adapter = ShellCommandAdapter()
        receipt = adapter.run(Invocation(argv=["definitely-not-a-real-command-xyz"]))
        assert not receipt.started
        assert "Could not start" in receipt.error

    def test_cwd_and_env(self, tmp_path: Path):
        adapter = ShellCommandAdapter()
        receipt = adapter.run(
            Invocation(
                argv=[sys.executable, "-c", "import os; print(os.getcwd()); print(os.environ['X_TEST'])"],
                cwd=str(tmp_path),
                env={"X_TEST": "42"},
                capture=True,
            )
        )
        lines = receipt.output.splitlines()
        assert Path(lines[0]).resolve() == tmp_path.resolve()
        assert lines[1] == "42"

    def test_uncaptured_output_is_none(self):
        adapter = ShellCommandAdapter()
        receipt = adapter.run(Invocation(argv=[sys.executable, "-c", "pass"]))
        assert receipt.ok
        assert receipt.output is None
