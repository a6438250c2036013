import pathlib
from typing import Any, Dict

import yaml

from rethinkdb_input.common.errors import ConfigurationError, ErrorCode
from .secrets import secret_manager, SecretManager

# Embulk-style config files nest the input plugin under this key
INPUT_SECTION = "in"


def load_raw_config(path: pathlib.Path, secrets: SecretManager = secret_manager) -> Dict[str, Any]:
    """
    Load the plugin configuration mapping from a YAML file.

    Accepts either a flat mapping of plugin keys or an envelope of the form
    ``{in: {type: rethinkdb, ...}}``. Secret references are resolved before
    the mapping is returned.

    Args:
        path: Path to the YAML configuration file.
        secrets: Manager used to resolve ``${provider:key}`` references.

    Returns:
        The raw, secret-resolved configuration mapping.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigurationError: If the YAML cannot be parsed or has the wrong shape.
    """
    if not path.exists():
        raise FileNotFoundError(f"Plugin config not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML from {path}", ErrorCode.CONFIG_FILE_INVALID, details=str(e)
        ) from e

    if not isinstance(raw, dict):
        raise ConfigurationError(
            "Plugin config must be a YAML mapping", ErrorCode.CONFIG_FILE_INVALID
        )

    section = raw.get(INPUT_SECTION, raw)
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"'{INPUT_SECTION}' section must be a YAML mapping", ErrorCode.CONFIG_FILE_INVALID
        )

    return secrets.resolve_object(section)
