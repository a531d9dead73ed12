# File: clearcase_bridge/core/base.py
# Purpose: Protocols for the collaborators a host job runner plugs into the bridge
from pathlib import Path
from typing import BinaryIO, Optional, Protocol, Sequence


class ByteSink(Protocol):
    def write(self, data: bytes) -> int:
        ...

    def flush(self) -> None:
        ...


class LogSink(ByteSink, Protocol):
    """Ordered, append-only job log. Implementations serialize their own writes."""

    def write_line(self, text: str = "") -> None:
        ...

    def write_fatal(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


class RunningProcess(Protocol):
    def join(self) -> int:
        """Block until the process exits and return its exit code."""
        ...


class ProcessLauncher(Protocol):
    is_unix: bool

    def launch(
        self,
        cmd: Sequence[str],
        env: Sequence[str],
        stdin: Optional[BinaryIO],
        stdout: ByteSink,
        working_dir: Path,
    ) -> RunningProcess:
        ...


class ClearToolLauncher(Protocol):
    """What SCM code needs in order to run cleartool inside a job."""

    launcher: ProcessLauncher
    job_log: LogSink
    workspace: Path

    def is_unix(self) -> bool:
        ...

    def get_cmd_string(self, cmd: Sequence[str]) -> str:
        ...

    def run(
        self,
        cmd: Sequence[str],
        working_dir: Optional[Path] = None,
        input_stream: Optional[BinaryIO] = None,
        output_stream: Optional[ByteSink] = None,
        log_command: bool = False,
    ) -> bool:
        ...
