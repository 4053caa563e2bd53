"""
Tests for the installation executor — filesystem setup, clone, build,
environment effect and module installs.
"""

import os
from pathlib import Path

import pytest

from darling_installer.adapters.mock import MockAdapter
from darling_installer.core.engine.executor import (
    EnvironmentEffect,
    apply_environment_effect,
    build_source,
    clone_source,
    environment_effect,
    install_modules,
    prepare_directories,
    remove_previous_install,
)
from darling_installer.core.errors import InstallationStepError
from darling_installer.core.models.module import InstallationPlan
from darling_installer.core.models.settings import InstallerSettings


@pytest.fixture
def prepared(home: Path, settings: InstallerSettings) -> Path:
    prepare_directories(settings, home)
    return home


class TestFilesystemSetup:
    def test_prepare_creates_both_dirs(self, home: Path, settings: InstallerSettings):
        work, share = prepare_directories(settings, home)
        assert work == home / ".tmp" / "darling"
        assert work.is_dir()
        assert share == home / ".local" / "share" / "darling"
        assert share.is_dir()

    def test_prepare_is_idempotent(self, prepared: Path, settings: InstallerSettings):
        prepare_directories(settings, prepared)

    def test_prepare_failure_is_fatal(self, home: Path, settings: InstallerSettings):
        (home / ".tmp").write_text("not a directory")
        with pytest.raises(InstallationStepError) as exc:
            prepare_directories(settings, home)
        assert exc.value.step == "Creating directories"

    def test_remove_previous_install(self, prepared: Path, settings: InstallerSettings):
        old = settings.source_path(prepared)
        old.mkdir()
        (old / "stale").write_text("x")
        remove_previous_install(settings, prepared)
        assert not settings.share_path(prepared).exists()

    def test_remove_missing_install_is_silent(self, home: Path, settings: InstallerSettings):
        remove_previous_install(settings, home)


class TestClone:
    def test_clone_and_move(self, prepared: Path, settings: InstallerSettings, runner: MockAdapter):
        receipt = clone_source(settings, prepared, runner)
        assert receipt.ok
        inv = runner.call_log[0]
        assert inv.argv == ["git", "clone", settings.repository]
        assert inv.cwd == str(settings.work_path(prepared))
        assert (settings.source_path(prepared) / "Cargo.toml").is_file()
        assert not (settings.work_path(prepared) / "darling").exists()

    def test_unstartable_git_is_fatal(self, prepared: Path, settings: InstallerSettings):
        mock = MockAdapter()
        mock.set_unstartable("git clone")
        with pytest.raises(InstallationStepError) as exc:
            clone_source(settings, prepared, mock)
        assert exc.value.step == "Cloning source"

    def test_nonzero_exit_warns_and_continues(
        self, prepared: Path, settings: InstallerSettings, runner: MockAdapter,
    ):
        runner.set_failure("git clone", exit_status=128)
        warnings = []
        receipt = clone_source(
            settings, prepared, runner,
            on_exit_warning=lambda step, r: warnings.append((step, r.exit_status)),
        )
        assert receipt.failed
        assert warnings == [("Cloning source", 128)]
        assert settings.source_path(prepared).is_dir()

    def test_nonzero_exit_fatal_in_strict_mode(
        self, prepared: Path, settings: InstallerSettings, runner: MockAdapter,
    ):
        strict = settings.model_copy(update={"strict_exit_codes": True})
        runner.set_failure("git clone", exit_status=128)
        with pytest.raises(InstallationStepError, match="exited with code 128"):
            clone_source(strict, prepared, runner)

    def test_missing_checkout_is_fatal(self, prepared: Path, settings: InstallerSettings):
        # git "succeeded" but produced nothing to move
        with pytest.raises(InstallationStepError) as exc:
            clone_source(settings, prepared, MockAdapter())
        assert exc.value.step == "Moving source"


class TestBuild:
    def test_build_runs_in_source_dir(self, prepared: Path, settings: InstallerSettings):
        mock = MockAdapter()
        assert build_source(settings, prepared, mock).ok
        inv = mock.call_log[0]
        assert inv.argv == ["cargo", "build", "--release"]
        assert inv.cwd == str(settings.source_path(prepared))

    def test_build_failure_policy(self, prepared: Path, settings: InstallerSettings):
        mock = MockAdapter()
        mock.set_failure("cargo build", exit_status=101)
        assert build_source(settings, prepared, mock).failed

        strict = settings.model_copy(update={"strict_exit_codes": True})
        with pytest.raises(InstallationStepError):
            build_source(strict, prepared, mock)

    def test_unstartable_cargo_is_fatal(self, prepared: Path, settings: InstallerSettings):
        mock = MockAdapter()
        mock.set_unstartable("cargo")
        with pytest.raises(InstallationStepError):
            build_source(settings, prepared, mock)


class TestEnvironmentEffect:
    def test_effect_paths(self, home: Path, settings: InstallerSettings):
        effect = environment_effect(settings, home)
        assert effect.path_entry == str(home / ".local/share/darling/source/target/release")
        assert effect.profile_path == home / ".bashrc"
        assert effect.profile_line == f'\nexport PATH="$PATH:{effect.path_entry}"\n'

    def test_extended_path(self):
        effect = EnvironmentEffect(path_entry="/opt/bin", profile_path=Path("/x"))
        assert effect.extended_path("/usr/bin") == f"/usr/bin{os.pathsep}/opt/bin"
        assert effect.extended_path("") == "/opt/bin"
        assert effect.extended_path(None) == "/opt/bin"

    def test_apply_to_environ_and_profile(self, home: Path, settings: InstallerSettings):
        effect = environment_effect(settings, home)
        environ = {"PATH": "/usr/bin"}
        apply_environment_effect(effect, environ)
        assert environ["PATH"].endswith(effect.path_entry)
        assert environ["PATH"].startswith("/usr/bin")
        assert effect.profile_line in (home / ".bashrc").read_text()

    def test_profile_is_appended_not_replaced(self, home: Path, settings: InstallerSettings):
        profile = home / ".bashrc"
        profile.write_text("alias ll='ls -l'\n")
        apply_environment_effect(environment_effect(settings, home), {})
        text = profile.read_text()
        assert text.startswith("alias ll='ls -l'\n")
        assert "export PATH=" in text

    def test_unwritable_profile_is_fatal(self, home: Path, settings: InstallerSettings):
        (home / ".bashrc").mkdir()
        with pytest.raises(InstallationStepError):
            apply_environment_effect(environment_effect(settings, home), {})

    def test_defaults_to_os_environ(self, home: Path, settings: InstallerSettings, monkeypatch):
        monkeypatch.setenv("PATH", "/usr/bin")
        effect = environment_effect(settings, home)
        apply_environment_effect(effect)
        assert os.environ["PATH"] == f"/usr/bin{os.pathsep}{effect.path_entry}"


class TestModuleInstall:
    def _plan(self, *names: str) -> InstallationPlan:
        plan = InstallationPlan()
        for name in names:
            plan.add(name.title(), name)
        return plan

    def test_installs_in_plan_order(self, settings: InstallerSettings):
        mock = MockAdapter()
        outcomes = install_modules(self._plan("arch", "vscode", "cargo"), settings, mock)
        assert mock.commands_run == [
            "darling module install arch",
            "darling module install vscode",
            "darling module install cargo",
        ]
        assert all(o.ok for o in outcomes)

    def test_failure_does_not_stop_the_loop(self, settings: InstallerSettings):
        mock = MockAdapter()
        mock.set_failure("darling module install vscode", exit_status=1, error="no such module")
        mock.set_unstartable("darling module install arch")
        outcomes = install_modules(self._plan("arch", "vscode", "cargo"), settings, mock)
        assert [o.receipt.status for o in outcomes] == ["not_started", "failed", "ok"]
        assert mock.call_count == 3

    def test_search_path_passed_to_module_install(self, settings: InstallerSettings):
        mock = MockAdapter()
        install_modules(self._plan("cargo"), settings, mock, search_path="/usr/bin:/opt/d")
        assert mock.call_log[0].env == {"PATH": "/usr/bin:/opt/d"}

    def test_callbacks(self, settings: InstallerSettings):
        started, done = [], []
        install_modules(
            self._plan("a", "b"), settings, MockAdapter(),
            on_start=lambda m: started.append(m.name),
            on_done=lambda o: done.append(o.module.name),
        )
        assert started == ["a", "b"]
        assert done == ["a", "b"]
