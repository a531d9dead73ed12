# File: clearcase_bridge/core/launcher.py
# Purpose: Default process launcher on top of subprocess.Popen with threaded stdin/stdout pumps
import os
import subprocess
import threading
from pathlib import Path
from typing import BinaryIO, Optional, Sequence

import structlog

from clearcase_bridge.core.base import ByteSink
from clearcase_bridge.core.errors import Interrupted, LaunchFailed

logger = structlog.get_logger(__name__)

CHUNK_SIZE = 8192
STDIN_JOIN_TIMEOUT_S = 0.5


def parse_env(env: Sequence[str]) -> dict[str, str]:
    """
    Turn ["KEY=VALUE", ...] into a mapping. Entries without "=" are rejected.
    """
    parsed: dict[str, str] = {}
    for entry in env:
        key, sep, value = entry.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid environment entry: {entry!r}")
        parsed[key] = value
    return parsed


class LaunchedProcess:
    """
    Handle on a started child process.

    Output is copied into the target sink by a pump thread; join() waits for the
    child and then for the pumps so the sink holds everything once it returns.
    """

    def __init__(
        self,
        proc: subprocess.Popen,
        stdout: ByteSink,
        stdin: Optional[BinaryIO] = None,
    ):
        self.proc = proc
        self._errors: list[BaseException] = []
        self._cancelled = threading.Event()

        self._out_thread = threading.Thread(
            target=self._pump_out, args=(stdout,), name=f"stdout-{proc.pid}", daemon=True
        )
        self._out_thread.start()

        self._in_thread: Optional[threading.Thread] = None
        if stdin is not None:
            self._in_thread = threading.Thread(
                target=self._pump_in, args=(stdin,), name=f"stdin-{proc.pid}", daemon=True
            )
            self._in_thread.start()

    @property
    def pid(self) -> int:
        return self.proc.pid

    def _pump_out(self, sink: ByteSink) -> None:
        source = self.proc.stdout
        sink_ok = True
        try:
            while True:
                chunk = source.read1(CHUNK_SIZE)
                if not chunk:
                    break
                if not sink_ok:
                    # keep draining so the child never blocks on a full pipe
                    continue
                try:
                    sink.write(chunk)
                except (OSError, ValueError) as exc:
                    sink_ok = False
                    self._errors.append(exc)
            if sink_ok:
                sink.flush()
        except (OSError, ValueError) as exc:
            self._errors.append(exc)
        finally:
            source.close()

    def _pump_in(self, source: BinaryIO) -> None:
        target = self.proc.stdin
        try:
            while True:
                chunk = source.read(CHUNK_SIZE)
                if not chunk:
                    break
                target.write(chunk)
                target.flush()
        except BrokenPipeError:
            # child stopped reading; its exit code decides the outcome
            pass
        except (OSError, ValueError) as exc:
            self._errors.append(exc)
        finally:
            try:
                target.close()
            except OSError:
                pass

    def cancel(self) -> None:
        """Kill the child from another thread; a pending join() raises Interrupted."""
        self._cancelled.set()
        self._kill()

    def _kill(self) -> None:
        if self.proc.poll() is None:
            self.proc.kill()

    def _join_pumps(self) -> None:
        self._out_thread.join()
        if self._in_thread is not None:
            # an input stream without EOF must not outlive the child;
            # the daemon pump is abandoned and dies on its next write
            self._in_thread.join(STDIN_JOIN_TIMEOUT_S)
            if self._in_thread.is_alive():
                logger.debug("stdin_pump_abandoned", pid=self.pid)

    def join(self) -> int:
        try:
            code = self.proc.wait()
        except KeyboardInterrupt as exc:
            logger.warning("process_interrupted", pid=self.pid)
            self._kill()
            self.proc.wait()
            self._join_pumps()
            raise Interrupted(f"Interrupted while waiting for process {self.pid}") from exc

        self._join_pumps()
        if self._cancelled.is_set():
            logger.warning("process_interrupted", pid=self.pid, exit_code=code)
            raise Interrupted(f"Process {self.pid} was cancelled")
        if self._errors:
            error = self._errors[0]
            raise LaunchFailed(
                f"I/O failure while communicating with process {self.pid}: {error}",
                self.proc.args,
            ) from error
        return code


class SubprocessLauncher:
    """Starts processes with merged stdout/stderr and an explicit environment."""

    def __init__(self) -> None:
        self.is_unix = os.name != "nt"

    def launch(
        self,
        cmd: Sequence[str],
        env: Sequence[str],
        stdin: Optional[BinaryIO],
        stdout: ByteSink,
        working_dir: Path,
    ) -> LaunchedProcess:
        args = [str(part) for part in cmd]
        try:
            proc = subprocess.Popen(
                args,
                cwd=str(working_dir),
                env=parse_env(env),
                stdin=subprocess.PIPE if stdin is not None else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
        except OSError as exc:
            logger.error("process_launch_failed", command=args, cwd=str(working_dir), error=str(exc))
            raise LaunchFailed(f"Unable to start {args[0]}: {exc}", args) from exc

        logger.debug("process_started", command=args, cwd=str(working_dir), pid=proc.pid)
        return LaunchedProcess(proc, stdout, stdin)
