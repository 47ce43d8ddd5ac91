"""Authentication endpoints."""

from budgetbuddy.api import ApiClient
from budgetbuddy.models import AuthResponse, User
from budgetbuddy.normalizer import normalize_auth_response, normalize_user


class AuthService:
    """Login, registration and profile calls.

    These only talk to the backend; SessionStore persists the result.
    """

    def __init__(self, api: ApiClient) -> None:
        self.api = api

    def login(self, email: str, password: str) -> AuthResponse:
        payload = self.api.post("users/login", {"email": email, "password": password})
        return normalize_auth_response(payload)

    def register(self, name: str, email: str, password: str) -> AuthResponse:
        payload = self.api.post(
            "users/register",
            {"name": name, "email": email, "password": password},
        )
        return normalize_auth_response(payload)

    def get_profile(self) -> User:
        return normalize_user(self.api.get("users/profile"))
