from dataclasses import dataclass, field

MIN_PORT = 1
MAX_PORT = 65535
DEFAULT_TIMEOUT_MS = 20000


@dataclass(frozen=True)
class Credentials:
    host: str
    port: int = 22
    username: str = ""
    password: str = field(default="", repr=False)  # Never shown in repr or logs

    def __post_init__(self):
        if not self.host or not self.host.strip():
            raise ValueError("Invalid host: must be a non-empty string")
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ValueError(f"Invalid port value: '{self.port}' - must be an integer")
        if not MIN_PORT <= self.port <= MAX_PORT:
            raise ValueError(
                f"Invalid port value: {self.port} - must be between {MIN_PORT} and {MAX_PORT}"
            )


@dataclass(frozen=True)
class SessionConfig:
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    passive_mode: bool = True  # Kept for interface compatibility; SFTP has no passive mode
    known_hosts_file: str | None = None  # None means ~/.ssh/known_hosts

    def __post_init__(self):
        if isinstance(self.timeout_ms, bool) or not isinstance(self.timeout_ms, int):
            raise ValueError(f"Invalid timeout value: '{self.timeout_ms}' - must be an integer")
        if self.timeout_ms <= 0:
            raise ValueError(f"Invalid timeout value: {self.timeout_ms} - must be positive")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


@dataclass
class LogConfig:
    level: str = "INFO"
    file: str = ""
    console: bool = True
    propagate: bool = True  # Also pass records on to the application's root handlers
