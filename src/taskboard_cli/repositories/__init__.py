"""Repository interfaces for the Taskboard CLI.

This package contains abstract base classes (ABCs) that define the contracts
for data persistence operations. These are the "Ports" in the Hexagonal Architecture.

Implementations (Adapters) are in:
- taskboard_cli.adapters.sqlite (local storage)
- taskboard_cli.adapters.rest_api (remote API)
"""

from .repository import TaskRepository, UserRepository

__all__ = [
    "TaskRepository",
    "UserRepository",
]
