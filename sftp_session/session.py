"""
Per-operation SFTP facade.

SftpSession holds connection parameters only. Each public method opens its
own transport, performs one action, and closes the transport before
returning, on success and on failure alike.
"""

import errno
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import BinaryIO

from .config import DEFAULT_TIMEOUT_MS, Credentials, SessionConfig
from .errors import LocalFileError, PathError
from .paramiko_transport import ParamikoTransport
from .transport import Transport

logger = logging.getLogger(__name__)

TransportFactory = Callable[[Credentials, SessionConfig], Transport]


class SftpSession:
    """
    Upload, download, list and delete files on an SFTP server.

    The object is configuration only and can be shared between threads;
    concurrent calls use independent connections.

    Example:
        session = SftpSession("sftp.example.com", "user", "secret", 22)
        session.upload("/incoming/report.csv", "report.csv")
        if session.download("/outgoing/ack.csv", "ack.csv"):
            ...
    """

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        port: int,
        timeout: int = DEFAULT_TIMEOUT_MS,
        passive_mode: bool = True,
        *,
        known_hosts_file: str | None = None,
        transport_factory: TransportFactory = ParamikoTransport,
    ):
        self.credentials = Credentials(
            host=host, port=port, username=username, password=password
        )
        self.config = SessionConfig(
            timeout_ms=timeout,
            passive_mode=passive_mode,
            known_hosts_file=known_hosts_file,
        )
        self._transport_factory = transport_factory

    @classmethod
    def from_config(
        cls,
        credentials: Credentials,
        config: SessionConfig | None = None,
        transport_factory: TransportFactory = ParamikoTransport,
    ) -> "SftpSession":
        """Build a session from existing Credentials and SessionConfig objects."""
        config = config or SessionConfig()
        return cls(
            host=credentials.host,
            username=credentials.username,
            password=credentials.password,
            port=credentials.port,
            timeout=config.timeout_ms,
            passive_mode=config.passive_mode,
            known_hosts_file=config.known_hosts_file,
            transport_factory=transport_factory,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(host={self.credentials.host!r}, "
            f"port={self.credentials.port}, username={self.credentials.username!r})"
        )

    @contextmanager
    def _connection(self) -> Iterator[Transport]:
        """
        Open a transport for the duration of one operation.

        The transport is disconnected on every exit path. If the operation
        itself failed, a disconnect failure is logged and the original error
        propagates; otherwise the disconnect failure is raised.
        """
        transport = self._transport_factory(self.credentials, self.config)
        try:
            transport.connect()
        except BaseException:
            self._disconnect_after_error(transport)
            raise
        try:
            yield transport
        except BaseException:
            self._disconnect_after_error(transport)
            raise
        transport.disconnect()

    def _disconnect_after_error(self, transport: Transport) -> None:
        """Release a transport while another error propagates; log close failures."""
        try:
            transport.disconnect()
        except Exception as close_error:
            logger.warning(
                "Disconnect from %s:%d failed after an earlier error: %s",
                self.credentials.host,
                self.credentials.port,
                close_error,
            )

    def _open_local(self, local_path: str, mode: str) -> BinaryIO:
        try:
            return open(local_path, mode)
        except OSError as e:
            action = "reading" if "r" in mode else "writing"
            raise LocalFileError(
                e.errno, f"Cannot open local file for {action}: {local_path}"
            ) from e

    def upload(self, remote_path: str, local_path: str) -> None:
        """
        Upload a local file, replacing any remote file at remote_path.

        Raises:
            SftpConnectionError: If the connection or authentication fails.
            LocalFileError: If local_path cannot be opened for reading.
            PathError: If the remote parent directory does not exist.
            TransferError: If the remote write fails.
        """
        logger.debug("Uploading %s -> %s", local_path, remote_path)
        with self._connection() as transport:
            with self._open_local(local_path, "rb") as local_file:
                transport.upload_from(local_file, remote_path)
        logger.info("Uploaded %s to %s", local_path, remote_path)

    def download(self, remote_path: str, local_path: str) -> bool:
        """
        Download remote_path into local_path, overwriting it.

        Returns:
            False if the remote file does not exist (the local file is left
            untouched), True once the file has been downloaded.

        Raises:
            SftpConnectionError: If the connection or authentication fails.
            PathError: If remote_path is a directory. The local file is left
                untouched.
            LocalFileError: If local_path cannot be opened for writing.
            TransferError: If the remote read fails. A partial local file
                may remain.
        """
        logger.debug("Downloading %s -> %s", remote_path, local_path)
        with self._connection() as transport:
            if not transport.exists(remote_path):
                logger.debug("Remote file %s does not exist, nothing downloaded", remote_path)
                return False
            if transport.is_directory(remote_path):
                raise PathError(errno.EISDIR, f"Is a directory: {remote_path}")
            with self._open_local(local_path, "wb") as local_file:
                transport.download_to(remote_path, local_file)
        logger.info("Downloaded %s to %s", remote_path, local_path)
        return True

    def list_files(self, remote_directory_path: str) -> list[str]:
        """
        Return the names of all entries in a remote directory.

        Files and subdirectories are both included, in server order.

        Raises:
            SftpConnectionError: If the connection or authentication fails.
            PathError: If the directory does not exist.
        """
        with self._connection() as transport:
            entries = transport.list_directory(remote_directory_path)
        names = [entry.name for entry in entries]
        logger.debug("Listed %d entries in %s", len(names), remote_directory_path)
        return names

    def delete_file(self, remote_path: str) -> None:
        """
        Delete a remote file.

        Raises:
            SftpConnectionError: If the connection or authentication fails.
            PathError: If remote_path does not exist or is a directory.
        """
        with self._connection() as transport:
            transport.delete_file(remote_path)
        logger.info("Deleted %s", remote_path)
