# File: clearcase_bridge/core/fork_stream.py
# Purpose: Byte sink that duplicates every write to several destinations
from typing import Optional

import structlog

from clearcase_bridge.core.base import ByteSink

logger = structlog.get_logger(__name__)


class ForkOutputStream:
    """
    Fan-out writer.

    Each write is handed to every child in the order they were given. A child
    that raises is dropped from later writes and its error is kept in
    `errors`; the remaining children keep receiving data. Writes only raise
    once no child is left to receive them.
    """

    def __init__(self, *children: ByteSink, close_children: bool = False):
        if not children:
            raise ValueError("ForkOutputStream needs at least one destination")
        self.children = children
        self.close_children = close_children
        self.closed = False
        self.errors: list[BaseException] = []
        self._failed: set[int] = set()

    @property
    def first_error(self) -> Optional[BaseException]:
        return self.errors[0] if self.errors else None

    def _each(self, action: str, *args) -> None:
        for index, child in enumerate(self.children):
            if index in self._failed:
                continue
            try:
                getattr(child, action)(*args)
            except (OSError, ValueError) as exc:
                logger.warning(
                    "fork_stream_child_failed",
                    action=action,
                    child=type(child).__name__,
                    error=str(exc),
                )
                self._failed.add(index)
                self.errors.append(exc)
        if len(self._failed) == len(self.children):
            raise self.errors[0]

    def write(self, data: bytes) -> int:
        if self.closed:
            raise ValueError("write to closed ForkOutputStream")
        self._each("write", data)
        return len(data)

    def flush(self) -> None:
        self._each("flush")

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.close_children:
            self._each("close")
        else:
            self._each("flush")

    def writable(self) -> bool:
        return True
