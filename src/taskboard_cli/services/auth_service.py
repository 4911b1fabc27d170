"""Service for handling authentication-related operations."""

from __future__ import annotations

import logging

from pydantic import ValidationError as PydanticValidationError

from taskboard_cli.models import AuthSession, User, UserCreate
from taskboard_cli.models.exceptions import AuthError, ValidationError
from taskboard_cli.repositories import UserRepository
from taskboard_cli.services.config_service import ConfigService, get_config_service

logger = logging.getLogger(__name__)


class AuthService:
    """Signs users up, in and out, and keeps the credential of the active context."""

    def __init__(self, user_repository: UserRepository, config_service: ConfigService):
        self.repository = user_repository
        self.config_service = config_service

    def _remember(self, session: AuthSession) -> AuthSession:
        self.config_service.save_credentials(
            session.token, user=session.user.model_dump(mode="json")
        )
        return session

    async def signup(self, name: str, email: str, password: str) -> AuthSession:
        try:
            user_data = UserCreate(name=name, email=email, password=password)
        except PydanticValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"])
            raise ValidationError(f"Invalid {field}: {error['msg']}") from e
        session = await self.repository.signup(user_data)
        logger.info("Signed up %s", session.user.email)
        return self._remember(session)

    async def login(self, email: str, password: str) -> AuthSession:
        session = await self.repository.login(email, password)
        logger.info("Logged in as %s", session.user.email)
        return self._remember(session)

    async def logout(self) -> None:
        token = self.config_service.load_token()
        if token:
            await self.repository.logout(token)
        self.config_service.clear_credentials()

    async def current_user(self) -> User:
        """Resolve the stored credential to a user.

        Raises:
            AuthError: If there is no stored credential or it is no longer valid
        """
        return await self.repository.resolve(self.config_service.load_token())

    def cached_user(self) -> User | None:
        """Profile saved at login, without contacting the auth gateway."""
        credentials = self.config_service.load_credentials()
        if not credentials or not credentials.get("user"):
            return None
        return User.model_validate(credentials["user"])

    def is_authenticated(self) -> bool:
        """Check if a credential is stored for the active context."""
        return self.config_service.load_token() is not None

    def require_token(self) -> str:
        token = self.config_service.load_token()
        if not token:
            raise AuthError("Not logged in. Run 'taskboard login' first.")
        return token


def get_auth_service() -> AuthService:
    """Build an AuthService for the active context."""
    config_service = get_config_service()
    return AuthService(
        config_service.storage_strategy_context.user_repository, config_service
    )
