# File: clearcase_bridge/core/__init__.py
# Purpose: Command execution core
from clearcase_bridge.core.command_runner import CommandRunner, render_command
from clearcase_bridge.core.errors import CommandRunnerError, ExecutionFailed, Interrupted, LaunchFailed
from clearcase_bridge.core.fork_stream import ForkOutputStream
from clearcase_bridge.core.job_log import JobLog
from clearcase_bridge.core.launcher import LaunchedProcess, SubprocessLauncher

__all__ = [
    "CommandRunner",
    "CommandRunnerError",
    "ExecutionFailed",
    "ForkOutputStream",
    "Interrupted",
    "JobLog",
    "LaunchFailed",
    "LaunchedProcess",
    "SubprocessLauncher",
    "render_command",
]
