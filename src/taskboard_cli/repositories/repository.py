"""Repository abstraction layer for Taskboard CLI.

This module defines the abstract base classes (interfaces) for all repository types,
following the hexagonal architecture (Ports & Adapters) pattern.

Repositories provide an abstraction over data persistence, allowing the business logic
to remain independent of the underlying storage mechanism (local SQLite, remote API, etc.).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from taskboard_cli.models import AuthSession, Task, TaskCreate, TaskUpdate, User, UserCreate


class TaskRepository(ABC):
    """Abstract base class for task persistence operations.

    Every operation is scoped to the authenticated caller: tasks owned by
    another user behave exactly like tasks that do not exist.
    """

    @abstractmethod
    async def list_all(self) -> list[Task]:
        """List all tasks owned by the caller.

        Returns:
            List of Task objects

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            AuthError: If the bearer credential is missing or invalid
        """
        raise NotImplementedError(
            "TaskRepository.list_all() must be implemented by adapter"
        )

    @abstractmethod
    async def get(self, task_id: str) -> Task:
        """Get a specific task by ID.

        Args:
            task_id: Unique identifier for the task

        Returns:
            Task object

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            AuthError: If the bearer credential is missing or invalid
            NotFoundError: If task does not exist or is not owned by the caller
        """
        raise NotImplementedError("TaskRepository.get() must be implemented by adapter")

    @abstractmethod
    async def add(self, task_data: TaskCreate) -> Task:
        """Create a new task owned by the caller.

        Args:
            task_data: TaskCreate object with task details

        Returns:
            Created Task object with generated ID and timestamps

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            AuthError: If the bearer credential is missing or invalid
            ValidationError: If task data is invalid
        """
        raise NotImplementedError("TaskRepository.add() must be implemented by adapter")

    @abstractmethod
    async def update(self, task_id: str, updates: TaskUpdate) -> Task:
        """Update an existing task.

        Args:
            task_id: Unique identifier for the task
            updates: TaskUpdate object with fields to update

        Returns:
            Updated Task object

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            AuthError: If the bearer credential is missing or invalid
            NotFoundError: If task does not exist or is not owned by the caller
            ValidationError: If update data is invalid
        """
        raise NotImplementedError(
            "TaskRepository.update() must be implemented by adapter"
        )

    @abstractmethod
    async def delete(self, task_id: str) -> bool:
        """Delete a task.

        Args:
            task_id: Unique identifier for the task

        Returns:
            True if deletion was successful

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            AuthError: If the bearer credential is missing or invalid
            NotFoundError: If task does not exist or is not owned by the caller
        """
        raise NotImplementedError(
            "TaskRepository.delete() must be implemented by adapter"
        )


class UserRepository(ABC):
    """Abstract base class for the auth gateway.

    Issues bearer credentials and resolves them back to users.
    """

    @abstractmethod
    async def signup(self, user_data: UserCreate) -> AuthSession:
        """Register a new user and open a session for it.

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            ValidationError: If the email is already registered or data is invalid
        """
        raise NotImplementedError(
            "UserRepository.signup() must be implemented by adapter"
        )

    @abstractmethod
    async def login(self, email: str, password: str) -> AuthSession:
        """Exchange email and password for a bearer credential.

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            AuthError: If the credentials do not match
        """
        raise NotImplementedError(
            "UserRepository.login() must be implemented by adapter"
        )

    @abstractmethod
    async def logout(self, token: str) -> None:
        """Invalidate a bearer credential."""
        raise NotImplementedError(
            "UserRepository.logout() must be implemented by adapter"
        )

    @abstractmethod
    async def resolve(self, token: str | None) -> User:
        """Return the user a bearer credential belongs to.

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            AuthError: If the credential is missing or invalid
        """
        raise NotImplementedError(
            "UserRepository.resolve() must be implemented by adapter"
        )
