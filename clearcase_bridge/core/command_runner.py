# File: clearcase_bridge/core/command_runner.py
# Purpose: Run cleartool inside a job - route output to the job log or a temp file, enforce exit codes
import os
import tempfile
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Sequence

import structlog

from clearcase_bridge.config import Settings, load_environment_settings, load_settings
from clearcase_bridge.core.base import ByteSink, LogSink, ProcessLauncher, RunningProcess
from clearcase_bridge.core.errors import CommandRunnerError, ExecutionFailed, LaunchFailed
from clearcase_bridge.core.fork_stream import ForkOutputStream

logger = structlog.get_logger(__name__)


def render_command(cmd: Sequence[str]) -> str:
    """Space-joined command line for diagnostics. Not shell-safe."""
    return " ".join(cmd)


class CommandRunner:
    """
    Executes cleartool commands for one job.

    In quiet mode the command output is captured in a temporary file and only
    copied into the job log when the command fails. In verbose mode it streams
    straight into the job log. Either way a non-zero exit code becomes a fatal
    job log entry and an ExecutionFailed.
    """

    def __init__(
        self,
        executable: str,
        scm_name: str,
        job_log: LogSink,
        workspace: Path,
        launcher: ProcessLauncher,
        env: Optional[Sequence[str]] = None,
        settings_loader: Callable[[], Settings] = load_environment_settings,
    ):
        """
        Args:
            executable: Path of the tool, prepended to every command
            scm_name: Name used in the fatal job log line
            job_log: Job log sink (borrowed, never closed here)
            workspace: Default working directory
            launcher: Process launcher capability
            env: "KEY=VALUE" entries for the child; empty by default
            settings_loader: Called once per run to read the verbose override
        """
        self.executable = executable
        self.scm_name = scm_name
        self._job_log = job_log
        self._workspace = Path(workspace)
        self._launcher = launcher
        self.env = list(env) if env else []
        self.settings_loader = settings_loader

    @classmethod
    def from_settings(
        cls,
        job_log: LogSink,
        workspace: Path,
        launcher: ProcessLauncher,
        settings: Optional[Settings] = None,
    ) -> "CommandRunner":
        """Build a runner using the configured executable and SCM name"""
        settings = settings or load_settings()
        return cls(
            executable=settings.CLEARTOOL_EXECUTABLE,
            scm_name=settings.SCM_NAME,
            job_log=job_log,
            workspace=workspace,
            launcher=launcher,
        )

    @property
    def launcher(self) -> ProcessLauncher:
        return self._launcher

    @property
    def job_log(self) -> LogSink:
        return self._job_log

    @property
    def workspace(self) -> Path:
        return self._workspace

    def is_unix(self) -> bool:
        return self._launcher.is_unix

    def get_cmd_string(self, cmd: Sequence[str]) -> str:
        return render_command(cmd)

    def launch_process(
        self,
        cmd_with_exec: Sequence[str],
        env: Sequence[str],
        input_stream: Optional[BinaryIO],
        output_stream: ByteSink,
        working_dir: Path,
    ) -> RunningProcess:
        try:
            return self._launcher.launch(cmd_with_exec, env, input_stream, output_stream, working_dir)
        except CommandRunnerError:
            raise
        except OSError as exc:
            raise LaunchFailed(f"Unable to start {cmd_with_exec[0]}: {exc}", cmd_with_exec) from exc

    def _wait(self, process: RunningProcess, cmd_with_exec: Sequence[str]) -> int:
        try:
            return process.join()
        except CommandRunnerError:
            raise
        except OSError as exc:
            raise LaunchFailed(
                f"I/O failure while waiting for {cmd_with_exec[0]}: {exc}", cmd_with_exec
            ) from exc

    def run(
        self,
        cmd: Sequence[str],
        working_dir: Optional[Path] = None,
        input_stream: Optional[BinaryIO] = None,
        output_stream: Optional[ByteSink] = None,
        log_command: bool = False,
    ) -> bool:
        """
        Run the executable with cmd appended and wait for it to finish.

        Args:
            cmd: Arguments after the executable, e.g. ["lsview", "-s"]
            working_dir: Directory to run in, defaults to the workspace
            input_stream: Optional binary stream fed to the process stdin
            output_stream: Optional sink that also receives all output
            log_command: Stream output into the job log as it is produced

        Returns:
            True when the command exited with 0

        Raises:
            ExecutionFailed: The command exited non-zero
            LaunchFailed: The process could not be started or talked to, or
                output_stream failed while the command itself succeeded
            Interrupted: Waiting for the process was cancelled
        """
        if not cmd:
            raise ValueError("cmd must contain at least one argument")

        settings = self.settings_loader()
        log_command = log_command or settings.verbose_forced
        path = Path(working_dir) if working_dir is not None else self._workspace

        log_file: Optional[Path] = None
        file_logger: Optional[BinaryIO] = None
        try:
            if log_command:
                route: ByteSink = self._job_log
            else:
                fd, name = tempfile.mkstemp(
                    prefix=settings.TEMP_LOG_PREFIX,
                    suffix=settings.TEMP_LOG_SUFFIX,
                    dir=settings.TEMP_LOG_DIR,
                )
                log_file = Path(name)
                file_logger = os.fdopen(fd, "wb")
                route = file_logger

            out = route if output_stream is None else ForkOutputStream(output_stream, route)

            cmd_with_exec = [self.executable, *cmd]
            logger.debug(
                "command_started",
                command=cmd_with_exec,
                cwd=str(path),
                verbose=log_command,
                temp_log=str(log_file) if log_file else None,
            )

            process = self.launch_process(cmd_with_exec, self.env, input_stream, out, path)
            exit_code = self._wait(process, cmd_with_exec)
            if log_command:
                self._job_log.write_line()

            if exit_code != 0:
                if not log_command:
                    file_logger.flush()
                    self._replay(log_file)
                logger.warning("command_failed", command=cmd_with_exec, exit_code=exit_code)
                self._job_log.write_fatal(f"{self.scm_name} failed. exit code={exit_code}")
                raise ExecutionFailed(self.get_cmd_string(cmd), exit_code)

            # the caller's stream failing only counts once the exit code is known good
            if isinstance(out, ForkOutputStream) and out.first_error is not None:
                error = out.first_error
                raise LaunchFailed(
                    f"Unable to write output of {self.get_cmd_string(cmd)}: {error}", cmd_with_exec
                ) from error

            logger.debug("command_finished", command=cmd_with_exec, exit_code=exit_code)
        finally:
            self._cleanup(log_file, file_logger)
        return True

    def _replay(self, log_file: Path) -> None:
        """Copy a captured temp log into the job log, followed by a blank line"""
        with open(log_file, "r", encoding="utf-8", errors="replace", newline=None) as reader:
            for line in reader:
                self._job_log.write_line(line.rstrip("\n"))
        self._job_log.write_line()

    def _cleanup(self, log_file: Optional[Path], file_logger: Optional[BinaryIO]) -> None:
        if file_logger is not None:
            try:
                file_logger.close()
            except OSError:
                pass
        if log_file is not None and log_file.exists():
            try:
                log_file.unlink()
            except OSError as exc:
                logger.warning("temp_log_delete_failed", path=str(log_file), error=str(exc))
                self._job_log.error(f"Unable to delete {log_file}")
