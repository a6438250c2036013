from __future__ import annotations

import os
from typing import Any, Dict, Optional, Protocol

from rethinkdb_input.common.errors import ConfigurationError, ErrorCode


class SecretProvider(Protocol):
    """Protocol for fetching secrets from secure storage."""

    def get_secret(self, key: str) -> Optional[str]:
        """
        Retrieve a secret by its key.

        Args:
            key (str): The identifier for the secret (e.g., 'RETHINKDB_PASSWORD').

        Returns:
            Optional[str]: The secret value, or None if not found.
        """
        ...


class EnvironmentSecretProvider:
    """Fetches secrets from environment variables."""

    def get_secret(self, key: str) -> Optional[str]:
        return os.environ.get(key)


class SecretManager:
    """Resolves ``${provider_id:key}`` references found in config values."""

    def __init__(self):
        self._providers: Dict[str, SecretProvider] = {
            "env": EnvironmentSecretProvider()
        }

    def register_provider(self, provider_id: str, provider: SecretProvider) -> None:
        self._providers[provider_id] = provider

    @staticmethod
    def is_reference(value: str) -> bool:
        return value.startswith("${") and value.endswith("}")

    def resolve(self, secret_ref: str) -> str:
        """Resolves a secret reference string.

        Format: ${provider_id:key}

        Raises:
            ConfigurationError: If the format is invalid, provider is unknown, or
                secret is not found.
        """
        cleaned_ref = secret_ref[2:-1]

        parts = cleaned_ref.split(":", 1)
        if len(parts) != 2:
            raise ConfigurationError(
                f"Invalid secret format '{secret_ref}'. Expected '${{provider_id:key}}'.",
                ErrorCode.SECRET_NOT_FOUND,
            )

        provider_id, key = parts
        provider = self._providers.get(provider_id)
        if not provider:
            raise ConfigurationError(
                f"Unknown secret provider ID: '{provider_id}'", ErrorCode.SECRET_NOT_FOUND
            )

        val = provider.get_secret(key)
        if val is not None:
            return val

        raise ConfigurationError(f"Secret not found: {secret_ref}", ErrorCode.SECRET_NOT_FOUND)

    def resolve_object(self, obj: Any) -> Any:
        """Recursively resolves secret references in dicts, lists and strings.

        Only whole-string references are resolved; ``prefix_${env:X}`` is kept verbatim.
        """
        if isinstance(obj, str):
            if self.is_reference(obj):
                return self.resolve(obj)
            return obj

        if isinstance(obj, dict):
            return {k: self.resolve_object(v) for k, v in obj.items()}

        if isinstance(obj, list):
            return [self.resolve_object(v) for v in obj]

        return obj


secret_manager = SecretManager()
