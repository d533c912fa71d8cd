"""Core types: configuration, results and exit codes."""

from .config import ConfigError, ConfigOverrides, ReleaseConfig, load_release_config
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "ConfigError",
    "ConfigOverrides",
    "ReleaseConfig",
    "load_release_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
