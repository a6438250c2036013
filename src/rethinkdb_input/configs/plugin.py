from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, model_validator

from rethinkdb_input.common.errors import ConfigurationError, ErrorCode

DEFAULT_PORT = 28015
DEFAULT_COLUMN_NAME = "record"


class PluginTask(BaseModel):
    """Validated connector configuration for a single run.

    Exactly one authentication mode (user + password) and exactly one of
    ``query`` / ``table`` are accepted. ``reql`` holds the wrapped query source
    computed at planning time.
    """

    host: str
    port: int = Field(default=DEFAULT_PORT, description="RethinkDB driver port.")
    database: str
    user: Optional[str] = None
    password: Optional[SecretStr] = None
    auth_key: Optional[SecretStr] = Field(
        default=None, description="Legacy auth key. Not supported; presence is an error."
    )
    cert_file: Optional[str] = Field(
        default=None, description="CA certificate used to pin the TLS connection."
    )
    query: Optional[str] = Field(default=None, description="Raw ReQL expression source.")
    table: Optional[str] = Field(default=None, description="Table to scan in full.")
    column_name: str = Field(default=DEFAULT_COLUMN_NAME, description="Output column name.")
    reql: Optional[str] = Field(default=None, description="Wrapped query source.")

    model_config = ConfigDict(extra="ignore", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _reject_auth_key(cls, data: Any) -> Any:
        # auth_key is rejected ahead of any field validation
        if isinstance(data, dict) and data.get("auth_key") is not None:
            raise ConfigurationError(
                "auth_key option is not supported yet", ErrorCode.UNSUPPORTED_AUTH
            )
        return data

    @model_validator(mode="after")
    def _check_modes(self) -> "PluginTask":
        if self.user is None or self.password is None:
            raise ConfigurationError(
                "user and password are needed", ErrorCode.MISSING_CREDENTIALS
            )
        if self.query is not None and self.table is not None:
            raise ConfigurationError(
                "only one of 'table' or 'query' parameter is needed",
                ErrorCode.QUERY_SOURCE_CONFLICT,
            )
        if self.query is None and self.table is None:
            raise ConfigurationError(
                "'table' or 'query' parameter is needed", ErrorCode.MISSING_QUERY_SOURCE
            )
        return self

    @classmethod
    def from_config(cls, raw: Mapping[str, Any]) -> "PluginTask":
        """Validates a raw config mapping.

        Mode checks raise ConfigurationError directly; field type failures are
        reported through the same exception type.

        Raises:
            ConfigurationError: On any validation failure.
        """
        try:
            return cls.model_validate(dict(raw))
        except ValidationError as exc:
            raise ConfigurationError(
                "Plugin configuration invalid", ErrorCode.INVALID_CONFIG, details=_summarize(exc)
            ) from exc


def _summarize(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def dump_task(task: PluginTask) -> Dict[str, Any]:
    """Serializable task source with secrets masked."""
    return task.model_dump(mode="json", exclude_none=True)
