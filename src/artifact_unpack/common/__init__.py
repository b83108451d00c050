"""Common utilities for artifact_unpack packages."""

from .config import ConfigLoader
from .config_utils import expand_path_variables
from .logging import setup_logging, get_logger, LogContext
from .logging_config import LoggingConfig
from .errors import UnpackError

__all__ = [
    'ConfigLoader',
    'LoggingConfig',
    'setup_logging',
    'get_logger',
    'LogContext',
    'UnpackError',
    'expand_path_variables',
]
