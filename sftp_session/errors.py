"""
Exception hierarchy for SftpSession operations.

Every error derives from SftpError and from the closest built-in exception,
so callers can catch either the library-specific class or the usual
``ConnectionError`` / ``OSError``.
"""


class SftpError(Exception):
    """Base exception for all SFTP session failures."""


class SftpConnectionError(SftpError, ConnectionError):
    """Raised when the SSH transport cannot be established."""


class AuthenticationError(SftpConnectionError):
    """Raised when the server rejects the supplied credentials."""


class LocalFileError(SftpError, OSError):
    """Raised when a local file cannot be opened for reading or writing."""


class TransferError(SftpError, OSError):
    """Raised when an established session fails mid-operation."""


class PathError(SftpError, OSError):
    """Raised when a remote path does not exist or has the wrong type."""
