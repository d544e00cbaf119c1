"""
Shared pytest fixtures for sftp_session tests.
"""

import posixpath
from collections.abc import Generator
from pathlib import Path
from typing import BinaryIO

import pytest

from sftp_session.config import Credentials, SessionConfig
from sftp_session.errors import PathError, SftpConnectionError, TransferError
from sftp_session.session import SftpSession
from sftp_session.transport import RemoteEntry


class FakeSftpServer:
    """
    In-memory remote filesystem shared by every FakeTransport it creates.

    Failure injection:
        fail_connect: raised from connect()
        fail_on: maps a transport method name to an exception raised from it
        fail_disconnect: raised from disconnect() after the connection is closed
    """

    def __init__(self):
        self.files: dict[str, bytes] = {}
        self.dirs: set[str] = {"/"}
        self.transports: list["FakeTransport"] = []
        self.fail_connect: Exception | None = None
        self.fail_on: dict[str, Exception] = {}
        self.fail_disconnect: Exception | None = None

    def factory(self, credentials: Credentials, config: SessionConfig) -> "FakeTransport":
        transport = FakeTransport(self, credentials, config)
        self.transports.append(transport)
        return transport

    def mkdir(self, path: str) -> None:
        self.dirs.add(path)

    def put(self, path: str, data: bytes) -> None:
        self.files[path] = data

    @property
    def open_connections(self) -> int:
        return sum(1 for t in self.transports if t.connected)


class FakeTransport:
    """Transport double operating on a FakeSftpServer."""

    def __init__(self, server: FakeSftpServer, credentials: Credentials, config: SessionConfig):
        self.server = server
        self.credentials = credentials
        self.config = config
        self.connected = False
        self.connect_calls = 0
        self.disconnect_calls = 0

    def _check(self, operation: str) -> None:
        if not self.connected:
            raise TransferError(f"{operation} called while disconnected")
        error = self.server.fail_on.get(operation)
        if error is not None:
            raise error

    def connect(self) -> None:
        self.connect_calls += 1
        if self.server.fail_connect is not None:
            raise self.server.fail_connect
        self.connected = True

    def disconnect(self) -> None:
        self.disconnect_calls += 1
        self.connected = False
        if self.server.fail_disconnect is not None:
            raise self.server.fail_disconnect

    def exists(self, path: str) -> bool:
        self._check("exists")
        return path in self.server.files or path in self.server.dirs

    def is_directory(self, path: str) -> bool:
        self._check("is_directory")
        if path not in self.server.files and path not in self.server.dirs:
            raise PathError(f"No such file or directory: {path}")
        return path in self.server.dirs

    def download_to(self, remote_path: str, stream: BinaryIO) -> None:
        self._check("download_to")
        if remote_path not in self.server.files:
            raise PathError(f"No such file: {remote_path}")
        stream.write(self.server.files[remote_path])

    def upload_from(self, stream: BinaryIO, remote_path: str) -> None:
        self._check("upload_from")
        if posixpath.dirname(remote_path) not in self.server.dirs:
            raise PathError(f"No such directory: {posixpath.dirname(remote_path)}")
        if remote_path in self.server.dirs:
            raise TransferError(f"Is a directory: {remote_path}")
        self.server.files[remote_path] = stream.read()

    def list_directory(self, path: str) -> list[RemoteEntry]:
        self._check("list_directory")
        if path not in self.server.dirs:
            raise PathError(f"No such directory: {path}")
        entries = [
            RemoteEntry(name=posixpath.basename(name), size=len(data))
            for name, data in self.server.files.items()
            if posixpath.dirname(name) == path
        ]
        entries.extend(
            RemoteEntry(name=posixpath.basename(name), is_dir=True)
            for name in sorted(self.server.dirs)
            if name != path and posixpath.dirname(name) == path
        )
        return entries

    def delete_file(self, path: str) -> None:
        self._check("delete_file")
        if path in self.server.dirs:
            raise PathError(f"Is a directory: {path}")
        if path not in self.server.files:
            raise PathError(f"No such file: {path}")
        del self.server.files[path]


@pytest.fixture
def fake_server() -> FakeSftpServer:
    """Creates an empty in-memory server with /incoming and /outgoing directories."""
    server = FakeSftpServer()
    server.mkdir("/incoming")
    server.mkdir("/outgoing")
    return server


@pytest.fixture
def session(fake_server: FakeSftpServer) -> SftpSession:
    """Creates an SftpSession wired to the fake server."""
    return SftpSession(
        "sftp.test.local",
        "testuser",
        "testpass",
        2222,
        transport_factory=fake_server.factory,
    )


@pytest.fixture
def credentials() -> Credentials:
    """Creates standard Credentials for testing."""
    return Credentials(host="test.ssh.local", port=22, username="testuser", password="testpass")


@pytest.fixture
def session_config(tmp_path: Path) -> SessionConfig:
    """Creates a SessionConfig whose known_hosts file lives in tmp_path."""
    return SessionConfig(timeout_ms=5000, known_hosts_file=str(tmp_path / "known_hosts"))


@pytest.fixture
def local_file(tmp_path: Path) -> Generator[Path, None, None]:
    """
    Creates a local file with binary content covering every byte value.

    Returns:
        Path to the file.
    """
    path = tmp_path / "source.bin"
    path.write_bytes(bytes(range(256)) * 64)
    yield path
