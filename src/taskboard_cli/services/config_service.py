"""Configuration service for managing Taskboard CLI configuration.

This module provides the ConfigService class, which is the single source of truth
for all configuration management in Taskboard CLI. It handles:

- Loading and saving config.json
- Context management (list, add, remove, switch)
- Credential management (bearer token and cached profile per context)
- Config file initialization with sensible defaults
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from json import JSONDecodeError
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import ValidationError as PydanticValidationError

from taskboard_cli.models.config_models import AppConfig, Context
from taskboard_cli.models.storage_strategy import (
    LocalStorageStrategy,
    RemoteStorageStrategy,
    StorageStrategy,
    StorageStrategyContext,
)
from taskboard_cli.services.api.client import DEFAULT_API_URL

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for managing application configuration.

    Loads and saves ``config.json``, owns the per-context credential files
    and builds the storage strategy for the active context.
    """

    def __init__(self):
        """Initialize the config service."""

        self.config_dir = Path(user_config_dir("taskboard_cli"))
        self.config_path = self.config_dir / "config.json"
        self.credentials_dir = self.config_dir / "credentials"
        self.data_dir = Path(user_data_dir("taskboard_cli"))

        # Ensure directories exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.credentials_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None
        self._storage_strategy_context: StorageStrategyContext | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    @property
    def storage_strategy_context(self) -> StorageStrategyContext:
        """Get the StorageStrategyContext for the active context (built lazily)."""
        if self._storage_strategy_context is None:
            self._storage_strategy_context = StorageStrategyContext(
                self._build_strategy(self.get_current_context())
            )
        return self._storage_strategy_context

    def _build_strategy(self, context: Context) -> StorageStrategy:
        logger.debug("Using %s context '%s' (%s)", context.type, context.name, context.source)
        if context.type == "remote":
            from taskboard_cli.services.api.client import APIClient

            return RemoteStorageStrategy(
                client=APIClient(base_url=context.source, config_service=self)
            )
        return LocalStorageStrategy(db_path=context.source, token_provider=self.load_token)

    def load_config(self) -> AppConfig:
        """Load configuration from storage, creating the default on first run."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # Expected on first run
            self._config = self.create_default_config()
        except (OSError, PydanticValidationError) as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self):
        """Save the current configuration to storage."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))
            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def reset_config(self):
        """Reset configuration to defaults and drop all credentials."""
        self._config = None
        self._storage_strategy_context = None
        if self.config_path.exists():
            self.config_path.unlink()
        for cred_file in self.credentials_dir.glob("*.json"):
            cred_file.unlink()
        self.create_default_config()

    def create_default_config(self) -> AppConfig:
        """Create a default configuration.

        The local context is active by default; a remote context pointing at
        the default API URL is added for easy switching.
        """
        local_context = Context(
            name="local",
            type="local",
            source=str(self.data_dir / "taskboard.db"),
            description="Local SQLite storage",
        )
        cloud_context = Context(
            name="cloud",
            type="remote",
            source=DEFAULT_API_URL,
            description="Taskboard server (requires login)",
        )

        self._config = AppConfig(
            current_context_name=local_context.name,
            contexts=[local_context, cloud_context],
        )
        self.save_config()
        return self._config

    def list_contexts(self) -> list[Context]:
        """List all available contexts."""
        return self.config.contexts

    def get_current_context(self) -> Context:
        """Get the currently active context.

        Raises:
            ValueError: If the current context is not configured
        """
        return self.config.get_current_context()

    def use_context(self, name: str) -> Context:
        """Set the current context by name."""
        context = self.config.get_context(name)
        self.config.current_context_name = context.name
        self.save_config()
        self._storage_strategy_context = None
        return context

    def add_context(self, context: Context):
        """Add a new context to the configuration."""
        self.config.add_context(context)
        self.save_config()

    def remove_context(self, name: str):
        """Remove a context from the configuration.

        Raises:
            ValueError: If the context is the active one or does not exist
        """
        if name == self.config.current_context_name:
            raise ValueError(f"Cannot remove the active context '{name}'")
        self.config.remove_context(name)
        self.save_config()
        self.remove_context_credentials(name)

    def remove_context_credentials(self, context_name: str):
        """Remove credentials associated with a context."""
        cred_path = self.credentials_dir / f"{context_name}.json"
        if cred_path.exists():
            cred_path.unlink()

    def load_credentials(self) -> dict | None:
        """Load credentials for the current context.

        Returns:
            dict with 'token' and 'user', or None if not found
        """
        try:
            current_context = self.config.get_current_context()
        except ValueError:
            return None
        return self.load_context_credentials(current_context.name)

    def load_context_credentials(self, context_name: str) -> dict | None:
        """Load credentials for a specific context."""
        cred_path = self.credentials_dir / f"{context_name}.json"
        if not cred_path.exists():
            return None

        try:
            with open(cred_path, encoding="utf-8") as f:
                return json.load(f)
        except JSONDecodeError:
            logger.warning("Ignoring corrupt credentials file %s", cred_path)
            return None

    def load_token(self) -> str | None:
        """Bearer token of the current context, if logged in."""
        credentials = self.load_credentials()
        if not credentials:
            return None
        return credentials.get("token")

    def save_credentials(
        self,
        token: str,
        user: dict[str, Any] | None = None,
        context_name: str | None = None,
    ):
        """Save credentials for a context.

        Args:
            token: The bearer token
            user: Profile of the logged-in user, cached for display
            context_name: Context name (defaults to current context)
        """
        if context_name is None:
            context_name = self.config.get_current_context().name

        cred_data: dict[str, Any] = {"token": token}
        if user:
            cred_data["user"] = user

        cred_path = self.credentials_dir / f"{context_name}.json"
        cred_path.parent.mkdir(parents=True, exist_ok=True)

        with open(cred_path, "w", encoding="utf-8") as f:
            json.dump(cred_data, f, indent=2)

        # Set secure file permissions
        cred_path.chmod(0o600)

    def clear_credentials(self, context_name: str | None = None) -> None:
        """Clear credentials for a context (defaults to current context)."""
        if context_name is None:
            try:
                context_name = self.config.get_current_context().name
            except ValueError:
                return
        self.remove_context_credentials(context_name)


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service


def get_storage_strategy_context() -> StorageStrategyContext:
    """Get a StorageStrategyContext based on the current configuration."""
    return get_config_service().storage_strategy_context
