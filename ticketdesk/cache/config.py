"""
Connection settings for the Valkey server behind the view cache.

The values are taken from the validated ``TrackerConfig``; this module
reads nothing from the environment itself.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from ..utils.config import TrackerConfig


@dataclass(frozen=True)
class ValkeyConfig:
    """Where the view cache connects and how long it waits."""

    host: str = "localhost"
    port: int = 6379
    password: Optional[str] = None
    database: int = 0
    timeout_seconds: float = 2.0

    @classmethod
    def from_tracker_config(cls, config: "TrackerConfig") -> "ValkeyConfig":
        return cls(
            host=config.valkey_host,
            port=config.valkey_port,
            password=config.valkey_password,
            database=config.valkey_database,
        )

    def to_connection_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``valkey.Valkey``; responses come back as text."""
        kwargs: Dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "db": self.database,
            "socket_timeout": self.timeout_seconds,
            "socket_connect_timeout": self.timeout_seconds,
            "decode_responses": True,
        }
        if self.password:
            kwargs["password"] = self.password
        return kwargs

    def __str__(self) -> str:
        secret = "***" if self.password else "none"
        return f"valkey://{self.host}:{self.port}/{self.database} (password: {secret})"
