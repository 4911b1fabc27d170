"""Core domain models: tasks and users."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

TaskStatus = Literal["To Do", "In Progress", "Done"]
StatusFilter = Literal["All", "To Do", "In Progress", "Done"]

STATUSES: tuple[str, ...] = ("To Do", "In Progress", "Done")
STATUS_FILTERS: tuple[str, ...] = ("All", *STATUSES)
DEFAULT_STATUS = "To Do"


class Task(BaseModel):
    """Task model representing a complete task entity.

    Remote backends may serialize the identifier as ``_id``, the owner as
    ``user`` and timestamps in camelCase; all of them are accepted.

    Attributes:
        id: Unique identifier assigned by the server
        title: Task title (non-empty)
        description: Optional free-form description
        status: Board column the task belongs to
        owner_id: Identifier of the user that created the task
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    title: str = Field(min_length=1)
    description: str = ""
    status: TaskStatus = DEFAULT_STATUS
    owner_id: str | None = Field(
        default=None, validation_alias=AliasChoices("owner_id", "user")
    )
    created_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdAt")
    )
    updated_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("updated_at", "updatedAt")
    )


class TaskCreate(BaseModel):
    """Model for creating a new task.

    Attributes:
        title: Task title (required)
        description: Optional description
        status: Initial column, defaults to "To Do"
    """

    title: str
    description: str = ""
    status: TaskStatus = DEFAULT_STATUS


class TaskUpdate(BaseModel):
    """Model for updating an existing task.

    All fields are optional - only provided fields will be updated.
    """

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None


class User(BaseModel):
    """User model."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    name: str
    email: EmailStr
    created_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdAt")
    )
    updated_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("updated_at", "updatedAt")
    )


class UserCreate(BaseModel):
    """Model for registering a new user."""

    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)


class AuthSession(BaseModel):
    """Bearer credential issued by the auth gateway, with the user it belongs to."""

    token: str
    user: User
