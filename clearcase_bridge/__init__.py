# File: clearcase_bridge/__init__.py
# Purpose: Run cleartool from a job runner with exit-code checks and quiet/verbose job logs
from clearcase_bridge.core import (
    CommandRunner,
    CommandRunnerError,
    ExecutionFailed,
    ForkOutputStream,
    Interrupted,
    JobLog,
    LaunchFailed,
    SubprocessLauncher,
    render_command,
)

__version__ = "0.1.0"

__all__ = [
    "CommandRunner",
    "CommandRunnerError",
    "ExecutionFailed",
    "ForkOutputStream",
    "Interrupted",
    "JobLog",
    "LaunchFailed",
    "SubprocessLauncher",
    "render_command",
]
