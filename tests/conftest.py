# File: tests/conftest.py
# Purpose: Shared pytest fixtures - isolated settings, in-memory job log, scripted process launcher
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import pytest

from clearcase_bridge.core.command_runner import CommandRunner
from clearcase_bridge.core.job_log import JobLog


@dataclass
class LaunchCall:
    cmd: list[str]
    env: list[str]
    stdin: Any
    stdout: Any
    working_dir: Path


class ScriptedProcess:
    """Writes its scripted output into the target sink when joined"""

    def __init__(self, launcher: "FakeLauncher", stdout):
        self.launcher = launcher
        self.stdout = stdout

    def join(self) -> int:
        launcher = self.launcher
        launcher.joins += 1
        for chunk in launcher.output:
            self.stdout.write(chunk)
        self.stdout.flush()
        launcher.temp_logs_seen = sorted(launcher.temp_dir.iterdir()) if launcher.temp_dir else []
        if launcher.join_error is not None:
            raise launcher.join_error
        return launcher.exit_code


@dataclass
class FakeLauncher:
    output: list[bytes] = field(default_factory=list)
    exit_code: int = 0
    join_error: Optional[BaseException] = None
    launch_error: Optional[BaseException] = None
    temp_dir: Optional[Path] = None
    is_unix: bool = True
    calls: list[LaunchCall] = field(default_factory=list)
    joins: int = 0
    temp_logs_seen: list[Path] = field(default_factory=list)

    def launch(self, cmd, env, stdin, stdout, working_dir):
        self.calls.append(LaunchCall(list(cmd), list(env), stdin, stdout, working_dir))
        if self.launch_error is not None:
            raise self.launch_error
        return ScriptedProcess(self, stdout)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "HUDSON_CLEARCASE_VERBOSE",
        "CLEARTOOL_EXECUTABLE",
        "SCM_NAME",
        "TEMP_LOG_DIR",
        "TEMP_LOG_PREFIX",
        "TEMP_LOG_SUFFIX",
        "LOG_LEVEL",
        "LOG_DIR",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def temp_log_dir(tmp_path, monkeypatch) -> Path:
    path = tmp_path / "templogs"
    path.mkdir()
    monkeypatch.setenv("TEMP_LOG_DIR", str(path))
    return path


@pytest.fixture()
def workspace(tmp_path) -> Path:
    path = tmp_path / "ws"
    path.mkdir()
    return path


@pytest.fixture()
def job_log() -> JobLog:
    return JobLog()


@pytest.fixture()
def fake_launcher(temp_log_dir) -> FakeLauncher:
    return FakeLauncher(temp_dir=temp_log_dir)


@pytest.fixture()
def runner(job_log, workspace, fake_launcher) -> CommandRunner:
    return CommandRunner(
        executable="tool",
        scm_name="SCM",
        job_log=job_log,
        workspace=workspace,
        launcher=fake_launcher,
    )
