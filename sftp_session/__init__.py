__version__ = "0.1.0"

import logging

# Public API exports
from .config import Credentials, LogConfig, SessionConfig
from .errors import (
    AuthenticationError,
    LocalFileError,
    PathError,
    SftpConnectionError,
    SftpError,
    TransferError,
)
from .logger import setup_logging
from .paramiko_transport import ParamikoTransport, TrustOnFirstUsePolicy
from .session import SftpSession
from .transport import RemoteEntry, Transport

# Silent unless the application (or setup_logging) configures handlers
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    # Configuration
    "Credentials",
    "SessionConfig",
    "LogConfig",
    "setup_logging",
    # Session
    "SftpSession",
    # Transports
    "Transport",
    "RemoteEntry",
    "ParamikoTransport",
    "TrustOnFirstUsePolicy",
    # Errors
    "SftpError",
    "SftpConnectionError",
    "AuthenticationError",
    "LocalFileError",
    "TransferError",
    "PathError",
]
