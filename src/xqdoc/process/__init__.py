"""External xquerydoc pipeline process."""

from xqdoc.process.runner import (
    ProcessError,
    ProcessInterruptedError,
    ProcessLaunchError,
    ProcessResult,
    build_command,
    run_process,
)

__all__ = [
    "ProcessError",
    "ProcessInterruptedError",
    "ProcessLaunchError",
    "ProcessResult",
    "build_command",
    "run_process",
]
