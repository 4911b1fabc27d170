"""Authentication API endpoints."""

from taskboard_cli.services.api.client import APIClient, response_json


class AuthAPI:
    """Authentication API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def signup(self, name: str, email: str, password: str) -> dict:
        """Register a new account."""
        response = await self.client.post(
            "/auth/signup",
            json={"name": name, "email": email, "password": password},
            skip_auth=True,
        )
        return response_json(response)

    async def login(self, email: str, password: str) -> dict:
        """Login with email and password."""
        response = await self.client.post(
            "/auth/login",
            json={"email": email, "password": password},
            skip_auth=True,
        )
        return response_json(response)
