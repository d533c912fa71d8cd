"""Platform abstraction layer."""

from .files import reset_dir
from .process import (
    ProcessError,
    StreamingProcess,
    env_with,
    run,
    run_logged,
    run_streaming,
)

__all__ = [
    # files
    "reset_dir",
    # process
    "ProcessError",
    "StreamingProcess",
    "env_with",
    "run",
    "run_logged",
    "run_streaming",
]
