"""
Connection management for the RethinkDB driver.

A connection is opened per run and closed exactly once when the ``with``
block exits, whether the cursor drained normally or conversion failed.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from pydantic import BaseModel, ConfigDict, SecretStr

from rethinkdb_input.common.errors import ConfigurationError, ErrorCode
from rethinkdb_input.configs import PluginTask

logger = logging.getLogger(__name__)

PEM_MARKER = b"-----BEGIN CERTIFICATE-----"


class ConnectionParams(BaseModel):
    """Transport parameters for one connection."""

    host: str
    port: int
    database: str
    user: str
    password: SecretStr
    cert_file: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_task(cls, task: PluginTask) -> "ConnectionParams":
        return cls(
            host=task.host,
            port=task.port,
            database=task.database,
            user=task.user,
            password=task.password,
            cert_file=task.cert_file,
        )

    def connect_kwargs(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "db": self.database,
            "user": self.user,
            "password": self.password.get_secret_value(),
        }

    def __str__(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


def connect(driver: Any, params: ConnectionParams) -> Any:
    """Establishes a connection, pinning the CA certificate when one is configured.

    The certificate file is held open only for the duration of the connect call
    and must contain at least one PEM certificate.

    Raises:
        ConfigurationError: If the certificate file cannot be read or holds no
            PEM certificate.
    """
    kwargs = params.connect_kwargs()

    if not params.cert_file:
        logger.info(f"Connecting to {params}")
        return driver.connect(**kwargs)

    try:
        cert = open(params.cert_file, "rb")
    except OSError as e:
        raise ConfigurationError(
            "error reading TLS certificate file", ErrorCode.CERT_FILE_UNREADABLE, details=str(e)
        ) from e

    with cert:
        try:
            pem = cert.read()
        except OSError as e:
            raise ConfigurationError(
                "error reading TLS certificate file", ErrorCode.CERT_FILE_UNREADABLE, details=str(e)
            ) from e
        if PEM_MARKER not in pem:
            raise ConfigurationError(
                "error reading TLS certificate file",
                ErrorCode.CERT_FILE_UNREADABLE,
                details=f"{params.cert_file} holds no PEM certificate",
            )
        # the Python driver only accepts ca_certs as a path
        logger.info(f"Connecting to {params} with TLS certificate {params.cert_file}")
        return driver.connect(ssl={"ca_certs": params.cert_file}, **kwargs)


@contextmanager
def open_connection(driver: Any, params: ConnectionParams) -> Iterator[Any]:
    """Context manager yielding a live connection that is always closed on exit.

    Connection failures from the driver propagate unchanged.
    """
    conn = connect(driver, params)
    try:
        yield conn
    finally:
        conn.close()
        logger.debug(f"Closed connection to {params}")
