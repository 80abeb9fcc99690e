"""SSH command execution for remote-stats."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

import paramiko

from .config import AuthMethod, ConnectionSettings, Settings

_LOGGER = logging.getLogger(__name__)


class ConnectError(RuntimeError):
    """The SSH session could not be established or authenticated."""


class ExecError(RuntimeError):
    """A single remote command could not be executed."""


class CommandExecutor(ABC):
    """Runs shell commands on the monitored host."""

    @abstractmethod
    def run(self, command: str) -> str:
        """Return the stdout of *command* or raise :class:`ExecError`."""
        ...


class SSHCommandExecutor(CommandExecutor):
    """Execute commands over one long-lived paramiko session."""

    def __init__(
        self,
        connection: ConnectionSettings,
        settings: Optional[Settings] = None,
        client_factory: Callable[[], paramiko.SSHClient] = paramiko.SSHClient,
    ) -> None:
        self._connection = connection
        self._settings = settings or Settings()
        self._client_factory = client_factory
        self._client: Optional[paramiko.SSHClient] = None

    @property
    def connected(self) -> bool:
        return self._client is not None

    def _connect_args(self) -> Dict[str, Any]:
        conn = self._connection
        timeout = self._settings.connect_timeout
        args: Dict[str, Any] = {
            "hostname": conn.host,
            "port": conn.port,
            "username": conn.user,
            "timeout": timeout,
            "banner_timeout": timeout,
            "auth_timeout": timeout,
        }
        method = conn.auth_method
        if method is AuthMethod.PRIVATE_KEY:
            args.update(key_filename=conn.key, allow_agent=False, look_for_keys=False)
        elif method is AuthMethod.PASSWORD:
            args.update(password=conn.password, allow_agent=False, look_for_keys=False)
        else:
            args.update(allow_agent=True, look_for_keys=False)
        return args

    def connect(self) -> None:
        """Open and authenticate the session; raise :class:`ConnectError` on failure."""
        if self._client is not None:
            return
        conn = self._connection
        client = self._client_factory()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        _LOGGER.debug(
            "Connecting to %s as %s using %s authentication",
            conn.address,
            conn.user,
            conn.auth_method.value,
        )
        try:
            client.connect(**self._connect_args())
        except paramiko.AuthenticationException as err:
            client.close()
            raise ConnectError(f"Authentication failed for {conn.user}@{conn.address}: {err}") from err
        except (paramiko.SSHException, OSError) as err:
            client.close()
            raise ConnectError(f"Failed to connect to {conn.address}: {err}") from err
        self._client = client
        _LOGGER.info("Connected to %s", conn.address)

    def run(self, command: str) -> str:
        if self._client is None:
            raise ExecError(f"{command}: not connected")
        try:
            _, stdout, stderr = self._client.exec_command(
                command, timeout=self._settings.command_timeout
            )
            out = stdout.read().decode("utf-8", "ignore")
            err = stderr.read().decode("utf-8", "ignore")
        except (paramiko.SSHException, OSError, EOFError) as exc:
            raise ExecError(f"{command}: {exc}") from exc
        if err and not out:
            raise ExecError(f"{command}: {err.strip()}")
        return out

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "SSHCommandExecutor":
        self.connect()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
