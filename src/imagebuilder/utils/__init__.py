# utils/__init__.py

from .logger import setup_logger
from .exceptions import (
    AmbiguityError,
    CloudOperationError,
    ConfigurationError,
    ImageBuilderError,
    LookupFailure,
    NotFoundError,
    ReplicationFailure,
    ValidationRules,
    WaitAbortedError,
    WaitCancelledError,
    WaitTimeoutError,
)
from .files import read_file
from .polling import PollControl
from .config import ConfigManager
from .session import SessionManager, assume_role

__all__ = [
    "setup_logger",
    "AmbiguityError",
    "CloudOperationError",
    "ConfigurationError",
    "ImageBuilderError",
    "LookupFailure",
    "NotFoundError",
    "ReplicationFailure",
    "ValidationRules",
    "WaitAbortedError",
    "WaitCancelledError",
    "WaitTimeoutError",
    "read_file",
    "PollControl",
    "ConfigManager",
    "SessionManager",
    "assume_role",
]
