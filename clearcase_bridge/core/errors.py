# File: clearcase_bridge/core/errors.py
# Purpose: Exceptions raised by the command runner and process launcher
from typing import Optional


class CommandRunnerError(Exception):
    """Base class for command runner failures"""


class ExecutionFailed(CommandRunnerError, OSError):
    """
    The external command ran to completion but exited non-zero.

    Signal termination and application-level failures are not distinguished:
    both arrive here as a non-zero exit code.
    """

    def __init__(self, command_string: str, exit_code: int):
        self.command_string = command_string
        self.exit_code = exit_code
        super().__init__(
            f'cleartool did not return the expected exit code. '
            f'Command line="{command_string}", actual exit code={exit_code}'
        )

    def __str__(self) -> str:
        return self.args[0]


class LaunchFailed(CommandRunnerError, OSError):
    """The process could not be started, or its I/O could not be pumped"""

    def __init__(self, message: str, command: Optional[list[str]] = None):
        self.command = list(command) if command else []
        super().__init__(message)

    def __str__(self) -> str:
        return self.args[0]


class Interrupted(CommandRunnerError):
    """Waiting for the process was cancelled"""
