# File: clearcase_bridge/core/job_log.py
# Purpose: Default job log sink - ordered, thread-safe appends over a byte stream
import io
import threading
from typing import BinaryIO, Optional

import structlog

logger = structlog.get_logger(__name__)

FATAL_PREFIX = "FATAL: "
ERROR_PREFIX = "ERROR: "


class JobLog:
    """
    Operator-visible log of a single job.

    Raw bytes from verbose commands and formatted lines from the runner go to
    the same underlying stream, in the order they arrive. The log is borrowed
    by every runner that writes to it and is never closed by them.
    """

    def __init__(self, stream: Optional[BinaryIO] = None, encoding: str = "utf-8"):
        """
        Args:
            stream: Binary stream backing the log. Defaults to an in-memory buffer.
            encoding: Encoding used for text lines
        """
        self.stream = stream if stream is not None else io.BytesIO()
        self.encoding = encoding
        self._lock = threading.Lock()
        self._failed = False

    @property
    def failed(self) -> bool:
        """True once a fatal entry has been written"""
        return self._failed

    def write(self, data: bytes) -> int:
        with self._lock:
            self.stream.write(data)
        return len(data)

    def flush(self) -> None:
        with self._lock:
            self.stream.flush()

    def write_line(self, text: str = "") -> None:
        self.write((text + "\n").encode(self.encoding, errors="replace"))

    def write_fatal(self, message: str) -> None:
        """Write a job-failing entry"""
        self._failed = True
        logger.error("job_log_fatal", message=message)
        self.write_line(FATAL_PREFIX + message)

    def error(self, message: str) -> None:
        """Write a non-fatal error entry"""
        logger.warning("job_log_error", message=message)
        self.write_line(ERROR_PREFIX + message)

    def getvalue(self) -> str:
        """Decoded contents of an in-memory log"""
        if not isinstance(self.stream, io.BytesIO):
            raise TypeError("getvalue() is only available for in-memory job logs")
        with self._lock:
            data = self.stream.getvalue()
        return data.decode(self.encoding, errors="replace")

    def lines(self) -> list[str]:
        return self.getvalue().splitlines()
