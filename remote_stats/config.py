"""Connection target and runtime settings for remote-stats."""
from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import voluptuous as vol

from .util import resolve_private_key_path

DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_COMMAND_TIMEOUT = 15.0
DEFAULT_LOG_LEVEL = "WARNING"

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

TO_REDACT = {"password", "key"}
REDACTED = "**REDACTED**"

ENV_PREFIX = "REMOTE_STATS_"

TARGET_SCHEMA = vol.Schema(
    {
        vol.Required("user"): vol.All(str, vol.Length(min=1)),
        vol.Required("host"): vol.All(str, vol.Length(min=1)),
        vol.Required("port"): vol.All(vol.Coerce(int), vol.Range(min=1, max=65535)),
    }
)

CONNECTION_SCHEMA = vol.Schema(
    {
        vol.Required("target"): str,
        vol.Required("interval"): vol.All(vol.Coerce(int), vol.Range(min=1)),
        vol.Exclusive("password", "credentials"): vol.Any(None, str),
        vol.Exclusive("key", "credentials"): vol.Any(None, str),
    }
)

SETTINGS_SCHEMA = vol.Schema(
    {
        vol.Optional("connect_timeout", default=DEFAULT_CONNECT_TIMEOUT): vol.All(
            vol.Coerce(float), vol.Range(min=1)
        ),
        vol.Optional("command_timeout", default=DEFAULT_COMMAND_TIMEOUT): vol.All(
            vol.Coerce(float), vol.Range(min=1)
        ),
        vol.Optional("log_level", default=DEFAULT_LOG_LEVEL): vol.All(
            str, vol.Upper, vol.In(LOG_LEVELS)
        ),
    }
)


class AuthMethod(enum.Enum):
    """How the SSH session authenticates."""

    AGENT = "agent"
    PRIVATE_KEY = "private_key"
    PASSWORD = "password"


@dataclass(frozen=True)
class ConnectionSettings:
    """Validated description of the host to monitor."""

    user: str
    host: str
    port: int
    interval: int
    password: Optional[str] = None
    key: Optional[str] = None

    @property
    def auth_method(self) -> AuthMethod:
        if self.key:
            return AuthMethod.PRIVATE_KEY
        if self.password:
            return AuthMethod.PASSWORD
        return AuthMethod.AGENT

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    def as_dict(self) -> Dict[str, Any]:
        return {
            "user": self.user,
            "host": self.host,
            "port": self.port,
            "interval": self.interval,
            "password": self.password,
            "key": self.key,
            "auth": self.auth_method.value,
        }


@dataclass(frozen=True)
class Settings:
    """Runtime tunables read from the environment."""

    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL


def parse_target(target: str) -> Dict[str, Any]:
    """Split a ``user@host:port`` string and validate its parts.

    Raises ``vol.Invalid`` when the string does not have that shape.
    """

    user, sep, host_port = target.partition("@")
    if not sep or "@" in host_port:
        raise vol.Invalid("expected user@host:port")
    host, sep, port = host_port.rpartition(":")
    if not sep:
        raise vol.Invalid("expected user@host:port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return TARGET_SCHEMA({"user": user, "host": host, "port": port})


def build_connection_settings(
    target: str,
    interval: Any,
    password: Optional[str] = None,
    key: Optional[str] = None,
) -> ConnectionSettings:
    """Validate command line input into :class:`ConnectionSettings`."""

    data: Dict[str, Any] = {"target": target, "interval": interval}
    if password:
        data["password"] = password
    if key:
        data["key"] = key
    validated = CONNECTION_SCHEMA(data)
    parts = parse_target(validated["target"])
    return ConnectionSettings(
        user=parts["user"],
        host=parts["host"],
        port=parts["port"],
        interval=validated["interval"],
        password=validated.get("password"),
        key=resolve_private_key_path(validated.get("key")),
    )


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read :class:`Settings` from ``REMOTE_STATS_*`` environment variables."""

    env = os.environ if environ is None else environ
    raw: Dict[str, Any] = {}
    for name in ("connect_timeout", "command_timeout", "log_level"):
        value = env.get(ENV_PREFIX + name.upper())
        if value:
            raw[name] = value
    return Settings(**SETTINGS_SCHEMA(raw))


def redact(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of *data* with secrets masked for logging."""

    return {
        key: (REDACTED if key in TO_REDACT and value else value)
        for key, value in data.items()
    }
