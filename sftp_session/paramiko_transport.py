"""
Transport implementation using paramiko.

Opens one SSH connection with password authentication and one SFTP channel
over it, and translates paramiko and socket failures into the sftp_session
error hierarchy.
"""

import errno
import logging
import stat
from pathlib import Path
from typing import BinaryIO

import paramiko

from .config import Credentials, SessionConfig
from .errors import AuthenticationError, PathError, SftpConnectionError, TransferError
from .transport import RemoteEntry

logger = logging.getLogger(__name__)

# Failures that can surface from an established channel
TRANSFER_FAILURES = (OSError, EOFError, paramiko.SSHException)


def default_known_hosts_path() -> Path:
    return Path.home() / ".ssh" / "known_hosts"


class TrustOnFirstUsePolicy(paramiko.MissingHostKeyPolicy):
    """
    Trust-on-first-use host key policy (same model as OpenSSH).

    - Unknown host: accept and save key to the known hosts file
    - Known host, same key: accept
    - Known host, CHANGED key: reject (possible MITM attack)
    """

    def __init__(self, known_hosts_path: Path | None = None):
        self._known_hosts_path = known_hosts_path or default_known_hosts_path()

    def missing_host_key(self, client, hostname, key):
        host_keys = client.get_host_keys()
        existing = host_keys.lookup(hostname)

        if existing is not None:
            key_type = key.get_name()
            existing_key = existing.get(key_type)
            if existing_key is not None and existing_key != key:
                raise paramiko.SSHException(
                    f"Host key for {hostname} has CHANGED. "
                    f"This could indicate a man-in-the-middle attack. "
                    f"If the server key was legitimately changed, remove the old "
                    f"entry from {self._known_hosts_path} and try again."
                )

        logger.info("Adding host key for %s to known_hosts", hostname)
        host_keys.add(hostname, key.get_name(), key)

        try:
            self._known_hosts_path.parent.mkdir(parents=True, exist_ok=True)
            host_keys.save(str(self._known_hosts_path))
        except OSError as e:
            logger.warning("Could not save known_hosts: %s", e)


class ParamikoTransport:
    """
    A single SSH/SFTP connection built on paramiko.SSHClient.

    Only password authentication is attempted; keys and the SSH agent are
    never consulted.
    """

    def __init__(self, credentials: Credentials, config: SessionConfig):
        self.credentials = credentials
        self.config = config
        self._ssh: paramiko.SSHClient | None = None
        self._sftp: paramiko.SFTPClient | None = None

    @property
    def connected(self) -> bool:
        return self._sftp is not None

    def _known_hosts_path(self) -> Path:
        if self.config.known_hosts_file:
            return Path(self.config.known_hosts_file).expanduser()
        return default_known_hosts_path()

    def connect(self) -> None:
        """Establish SSH connection and open SFTP session."""
        host = self.credentials.host
        port = self.credentials.port
        known_hosts = self._known_hosts_path()

        try:
            self._ssh = paramiko.SSHClient()
            if self.config.known_hosts_file is None:
                self._ssh.load_system_host_keys()
            try:
                self._ssh.load_host_keys(str(known_hosts))
            except FileNotFoundError:
                pass
            self._ssh.set_missing_host_key_policy(TrustOnFirstUsePolicy(known_hosts))

            logger.debug(
                "Connecting to SSH %s:%d as %r with password", host, port, self.credentials.username
            )
            timeout = self.config.timeout_seconds
            self._ssh.connect(
                hostname=host,
                port=port,
                username=self.credentials.username,
                password=self.credentials.password,
                timeout=timeout,
                banner_timeout=timeout,
                auth_timeout=timeout,
                allow_agent=False,
                look_for_keys=False,
            )
            self._sftp = self._ssh.open_sftp()
            logger.debug("Connected to SSH server %s:%d", host, port)

        except paramiko.AuthenticationException as e:
            self._cleanup_connections()
            logger.error("SSH authentication failed for %s:%d: %s", host, port, e)
            raise AuthenticationError(f"SSH authentication failed: {e}") from e
        except TimeoutError as e:
            self._cleanup_connections()
            logger.error("SSH connection timeout for %s:%d: %s", host, port, e)
            raise SftpConnectionError(f"SSH connection timeout: {e}") from e
        except (OSError, EOFError) as e:
            self._cleanup_connections()
            logger.error("SSH connection to %s:%d failed: %s", host, port, e)
            raise SftpConnectionError(f"SSH connection failed: {e}") from e
        except paramiko.SSHException as e:
            self._cleanup_connections()
            logger.error("SSH error connecting to %s:%d: %s", host, port, e)
            raise SftpConnectionError(f"SSH error: {e}") from e

    def _close_all(self) -> Exception | None:
        """Close SFTP then SSH, returning the first close failure."""
        first_error = None
        if self._sftp is not None:
            try:
                self._sftp.close()
            except Exception as e:
                first_error = e
            self._sftp = None
        if self._ssh is not None:
            try:
                self._ssh.close()
            except Exception as e:
                first_error = first_error or e
            self._ssh = None
        return first_error

    def _cleanup_connections(self) -> None:
        """Release a half-open connection; the connect error takes precedence."""
        error = self._close_all()
        if error is not None:
            logger.debug("Ignoring close failure after connect error: %s", error)

    def disconnect(self) -> None:
        """Close SFTP session and SSH connection."""
        error = self._close_all()
        if error is not None:
            raise TransferError(f"Error closing SSH connection: {error}") from error
        logger.debug(
            "SSH connection to %s:%d closed", self.credentials.host, self.credentials.port
        )

    def _require_sftp(self) -> paramiko.SFTPClient:
        if self._sftp is None:
            raise TransferError("SFTP session is not connected")
        return self._sftp

    def _translate_error(self, error: Exception, path: str) -> Exception:
        """Translate a failure on an open channel to the sftp_session hierarchy."""
        code = getattr(error, "errno", None)
        if code == errno.ENOENT:
            return PathError(errno.ENOENT, f"No such file or directory: {path}")
        if code == errno.EACCES:
            return TransferError(errno.EACCES, f"Permission denied: {path}")
        return TransferError(f"SFTP operation on {path} failed: {error}")

    def exists(self, path: str) -> bool:
        sftp = self._require_sftp()
        try:
            sftp.stat(path)
        except TRANSFER_FAILURES as e:
            if getattr(e, "errno", None) == errno.ENOENT:
                return False
            raise self._translate_error(e, path) from e
        return True

    def is_directory(self, path: str) -> bool:
        sftp = self._require_sftp()
        try:
            attr = sftp.stat(path)
        except TRANSFER_FAILURES as e:
            raise self._translate_error(e, path) from e
        return bool(attr.st_mode) and stat.S_ISDIR(attr.st_mode)

    def download_to(self, remote_path: str, stream: BinaryIO) -> None:
        sftp = self._require_sftp()
        try:
            sftp.getfo(remote_path, stream)
        except TRANSFER_FAILURES as e:
            raise self._translate_error(e, remote_path) from e

    def upload_from(self, stream: BinaryIO, remote_path: str) -> None:
        sftp = self._require_sftp()
        try:
            sftp.putfo(stream, remote_path)
        except TRANSFER_FAILURES as e:
            raise self._translate_error(e, remote_path) from e

    def list_directory(self, path: str) -> list[RemoteEntry]:
        sftp = self._require_sftp()
        try:
            attrs = sftp.listdir_attr(path)
        except TRANSFER_FAILURES as e:
            raise self._translate_error(e, path) from e

        results = []
        for attr in attrs:
            name = attr.filename
            if name in (".", ".."):
                continue
            is_dir = stat.S_ISDIR(attr.st_mode) if attr.st_mode else False
            size = attr.st_size if attr.st_size and not is_dir else 0
            results.append(RemoteEntry(name=name, size=size, is_dir=is_dir))
        return results

    def delete_file(self, path: str) -> None:
        sftp = self._require_sftp()
        # lstat: a symlink to a directory is removed as a link
        try:
            attr = sftp.lstat(path)
        except TRANSFER_FAILURES as e:
            raise self._translate_error(e, path) from e

        if attr.st_mode and stat.S_ISDIR(attr.st_mode):
            raise PathError(errno.EISDIR, f"Is a directory: {path}")

        try:
            sftp.remove(path)
        except TRANSFER_FAILURES as e:
            raise self._translate_error(e, path) from e
