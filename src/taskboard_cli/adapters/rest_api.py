"""REST API adapters - Repository implementations using the Taskboard REST API.

These adapters wrap the API client to implement the repository interfaces.
Ownership scoping and validation are enforced by the server; its error
responses arrive here already mapped to the exception taxonomy.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError

from taskboard_cli.models import AuthSession, Task, TaskCreate, TaskUpdate, User, UserCreate
from taskboard_cli.models.exceptions import AuthError, NetworkError
from taskboard_cli.repositories.repository import TaskRepository, UserRepository
from taskboard_cli.services.api.auth import AuthAPI
from taskboard_cli.services.api.client import APIClient
from taskboard_cli.services.api.tasks import TasksAPI


def to_task(data: object) -> Task:
    """Validate a task document from the server."""
    try:
        return Task.model_validate(data)
    except PydanticValidationError as e:
        raise NetworkError(
            f"Malformed task in server response: {e.error_count()} error(s)"
        ) from e


class RestApiTaskRepository(TaskRepository):
    """Task repository implementation using REST API."""

    def __init__(self, client: APIClient | None = None):
        """Initialize REST API task repository.

        Args:
            client: Optional API client; created on first use otherwise
        """
        self._client = client
        self._tasks_api: TasksAPI | None = None

    @property
    def tasks_api(self) -> TasksAPI:
        """Get or create TasksAPI instance."""
        if self._tasks_api is None:
            if self._client is None:
                self._client = APIClient()
            self._tasks_api = TasksAPI(self._client)
        return self._tasks_api

    async def list_all(self) -> list[Task]:
        tasks_data = await self.tasks_api.list_tasks()
        return [to_task(data) for data in tasks_data]

    async def get(self, task_id: str) -> Task:
        task_data = await self.tasks_api.get_task(task_id)
        return to_task(task_data)

    async def add(self, task_data: TaskCreate) -> Task:
        result = await self.tasks_api.create_task(
            task_data.title,
            description=task_data.description,
            status=task_data.status,
        )
        return to_task(result)

    async def update(self, task_id: str, updates: TaskUpdate) -> Task:
        result = await self.tasks_api.update_task(
            task_id, **updates.model_dump(exclude_none=True)
        )
        return to_task(result)

    async def delete(self, task_id: str) -> bool:
        await self.tasks_api.delete_task(task_id)
        return True


class RestApiUserRepository(UserRepository):
    """Auth gateway implementation using REST API.

    The server issues the bearer token; the profile it returns at login is
    cached alongside the token and serves as the resolved identity.
    """

    def __init__(self, client: APIClient | None = None):
        self._client = client
        self._auth_api: AuthAPI | None = None

    @property
    def client(self) -> APIClient:
        if self._client is None:
            self._client = APIClient()
        return self._client

    @property
    def auth_api(self) -> AuthAPI:
        """Get or create AuthAPI instance."""
        if self._auth_api is None:
            self._auth_api = AuthAPI(self.client)
        return self._auth_api

    @staticmethod
    def _session_from_response(data: dict) -> AuthSession:
        # Accept both {token, user} and a flat user document carrying the token
        user_data = data.get("user") or {k: v for k, v in data.items() if k != "token"}
        return AuthSession(token=data["token"], user=User.model_validate(user_data))

    async def signup(self, user_data: UserCreate) -> AuthSession:
        data = await self.auth_api.signup(
            user_data.name, user_data.email, user_data.password
        )
        if data.get("token"):
            return self._session_from_response(data)
        # Server registered the account without opening a session
        return await self.login(user_data.email, user_data.password)

    async def login(self, email: str, password: str) -> AuthSession:
        data = await self.auth_api.login(email, password)
        if not data.get("token"):
            raise AuthError("Login response did not include a token")
        return self._session_from_response(data)

    async def logout(self, token: str) -> None:
        """Tokens are stateless on the server; logging out only drops them locally."""

    async def resolve(self, token: str | None) -> User:
        if not token:
            raise AuthError("Not authorized, no token")
        config_service = self.client.config_manager
        credentials = config_service.load_credentials() if config_service else None
        if not credentials or credentials.get("token") != token or not credentials.get("user"):
            raise AuthError("Session not found, please log in again")
        return User.model_validate(credentials["user"])
