"""
Transport protocol definition.

Defines the connection-level interface SftpSession drives. The concrete
implementation is ParamikoTransport; tests substitute an in-memory double.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Protocol, runtime_checkable


@dataclass
class RemoteEntry:
    """A single entry of a remote directory listing."""

    name: str
    size: int = 0
    is_dir: bool = False


@runtime_checkable
class Transport(Protocol):
    """Protocol defining one SSH/SFTP connection.

    A transport is single-use: SftpSession calls connect() once, performs a
    single action, then calls disconnect().
    """

    def connect(self) -> None:
        """Open and authenticate the connection.

        If connect() fails, SftpSession still calls disconnect(), which must
        release whatever was half-opened.

        Raises:
            SftpConnectionError: If the server is unreachable or rejects the
                credentials.
        """
        ...

    def disconnect(self) -> None:
        """Close the connection. Safe to call when not connected or half-open."""
        ...

    def exists(self, path: str) -> bool:
        """Return True if a remote file or directory exists at path."""
        ...

    def is_directory(self, path: str) -> bool:
        """Return True if path is a remote directory.

        Raises:
            PathError: If path does not exist.
        """
        ...

    def download_to(self, remote_path: str, stream: BinaryIO) -> None:
        """Write the full contents of a remote file into a writable stream.

        Raises:
            PathError: If remote_path does not exist.
            TransferError: If the read fails mid-stream.
        """
        ...

    def upload_from(self, stream: BinaryIO, remote_path: str) -> None:
        """Write the full contents of a readable stream to a remote file.

        Any existing remote file is replaced.

        Raises:
            PathError: If the remote parent directory does not exist.
            TransferError: If the write fails mid-stream.
        """
        ...

    def list_directory(self, path: str) -> list[RemoteEntry]:
        """List a remote directory, excluding the '.' and '..' entries.

        Raises:
            PathError: If path does not exist or is not a directory.
        """
        ...

    def delete_file(self, path: str) -> None:
        """Delete a remote file.

        Raises:
            PathError: If path does not exist or is a directory.
        """
        ...
