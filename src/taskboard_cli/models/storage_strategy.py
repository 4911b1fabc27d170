"""
Strategy Pattern: Storage Strategy Container

This module implements the Strategy Pattern for backend selection.
Instead of using if/else at runtime, the StorageStrategyContext holds the strategy
at startup and injects it into services.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

from taskboard_cli.repositories import TaskRepository, UserRepository

if TYPE_CHECKING:
    from taskboard_cli.models.config_models import RealtimeConfig
    from taskboard_cli.services.api.client import APIClient
    from taskboard_cli.services.realtime.channel import RealtimeChannel
    from taskboard_cli.services.realtime.local import LocalRealtimeHub

TokenProvider = Callable[[], "str | None"]


class StorageStrategy(ABC):
    """
    Abstract base class for storage strategies.

    A strategy encapsulates the repository implementations and the realtime
    channel for a given backend (either Local SQLite or Remote API).

    The StorageStrategyContext creates one strategy at startup and injects it
    throughout the application. Services never know which strategy they're using.
    """

    @abstractmethod
    def get_task_repository(self) -> TaskRepository:
        """Get task repository implementation for this strategy."""

    @abstractmethod
    def get_user_repository(self) -> UserRepository:
        """Get user repository (auth gateway) implementation for this strategy."""

    @abstractmethod
    def create_realtime_channel(
        self, user_id: str | None, config: RealtimeConfig | None = None
    ) -> RealtimeChannel:
        """Create a realtime channel for the authenticated user."""

    @property
    def event_publisher(self) -> LocalRealtimeHub | None:
        """Hub that in-process task mutations are published to, if any."""
        return None

    @property
    @abstractmethod
    def storage_type(self) -> str:
        """Get storage type identifier (for logging/debugging)."""


class LocalStorageStrategy(StorageStrategy):
    """
    Local SQLite storage strategy.

    Repositories use the local SQLite vault and realtime events travel through
    the process-wide hub. This is instantiated once at startup if the active
    context is 'local'.
    """

    def __init__(self, db_path: str, token_provider: TokenProvider | None = None):
        """
        Initialize local strategy.

        Args:
            db_path: Path to SQLite database file
            token_provider: Callable returning the stored bearer token
        """
        self.db_path = db_path

        # Import here to avoid circular dependencies
        from taskboard_cli.adapters.sqlite.task_repository import SqliteTaskRepository
        from taskboard_cli.adapters.sqlite.user_repository import SqliteUserRepository
        from taskboard_cli.services.realtime.local import get_local_hub

        self._user_repo = SqliteUserRepository(db_path=db_path)
        self._task_repo = SqliteTaskRepository(
            db_path=db_path,
            token_provider=token_provider,
            user_repository=self._user_repo,
        )
        self._hub = get_local_hub()

    def get_task_repository(self) -> TaskRepository:
        return self._task_repo

    def get_user_repository(self) -> UserRepository:
        return self._user_repo

    def create_realtime_channel(
        self, user_id: str | None, config: RealtimeConfig | None = None
    ) -> RealtimeChannel:
        from taskboard_cli.services.realtime.local import LocalRealtimeChannel

        return LocalRealtimeChannel(self._hub, owner_id=user_id)

    @property
    def event_publisher(self) -> LocalRealtimeHub:
        return self._hub

    @property
    def storage_type(self) -> str:
        return "local"


class RemoteStorageStrategy(StorageStrategy):
    """
    Remote API storage strategy.

    Repositories use the REST API backend and realtime events arrive over the
    server's event stream. This is instantiated once at startup if the active
    context is 'remote'.
    """

    def __init__(self, client: APIClient | None = None):
        """
        Initialize remote strategy.

        Args:
            client: Optional shared API client (created lazily otherwise)
        """
        from taskboard_cli.adapters.rest_api import (
            RestApiTaskRepository,
            RestApiUserRepository,
        )

        self._client = client
        self._task_repo = RestApiTaskRepository(client=client)
        self._user_repo = RestApiUserRepository(client=client)

    def get_task_repository(self) -> TaskRepository:
        return self._task_repo

    def get_user_repository(self) -> UserRepository:
        return self._user_repo

    def create_realtime_channel(
        self, user_id: str | None, config: RealtimeConfig | None = None
    ) -> RealtimeChannel:
        from taskboard_cli.services.api.client import APIClient
        from taskboard_cli.services.realtime.sse import SseRealtimeChannel

        client = self._client if self._client is not None else APIClient()
        return SseRealtimeChannel(client, config=config)

    @property
    def storage_type(self) -> str:
        return "remote"


class StorageStrategyContext:
    """
    Strategy context that provides access to all repositories.

    This is the single source of truth for repository access throughout
    the application. It's created once at startup by the ConfigService
    and injected into all services.

    Usage:
        # At startup
        strategy = LocalStorageStrategy(db_path="/path/to/db")
        context = StorageStrategyContext(strategy)

        # In services
        task_repo = context.task_repository
        await task_repo.add(task)  # Works regardless of strategy
    """

    def __init__(self, strategy: StorageStrategy):
        """
        Initialize strategy context.

        Args:
            strategy: Storage strategy (Local or Remote)
        """
        self._strategy = strategy

    def switch_strategy(self, new_strategy: StorageStrategy):
        """Switch to a new storage strategy at runtime (advanced use case)."""
        self._strategy = new_strategy

    @property
    def task_repository(self) -> TaskRepository:
        """Get task repository from current strategy."""
        return self._strategy.get_task_repository()

    @property
    def user_repository(self) -> UserRepository:
        """Get user repository from current strategy."""
        return self._strategy.get_user_repository()

    @property
    def event_publisher(self) -> LocalRealtimeHub | None:
        """Get the in-process event hub, if the strategy has one."""
        return self._strategy.event_publisher

    def create_realtime_channel(
        self, user_id: str | None, config: RealtimeConfig | None = None
    ) -> RealtimeChannel:
        """Create a realtime channel from current strategy."""
        return self._strategy.create_realtime_channel(user_id, config)

    @property
    def storage_type(self) -> str:
        """Get storage type (for logging/debugging only)."""
        return self._strategy.storage_type

    @property
    def strategy(self) -> StorageStrategy:
        """Get underlying strategy (for advanced use cases)."""
        return self._strategy
