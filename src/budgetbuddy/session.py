"""Session store: bearer token and user profile in durable storage."""

import json
import logging
import threading
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Protocol

from budgetbuddy.config import load_json_config, save_json_config
from budgetbuddy.errors import ParseError, UnauthenticatedError
from budgetbuddy.models import AuthResponse, User
from budgetbuddy.normalizer import normalize_user
from budgetbuddy.notifications import SESSION_EXPIRED, Notifier

logger = logging.getLogger(__name__)

TOKEN_KEY = "bb_token"
USER_KEY = "bb_user"


class Storage(Protocol):
    """Key/value storage the session persists through."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class Authenticator(Protocol):
    """Backend calls the session store needs to sign in."""

    def login(self, email: str, password: str) -> AuthResponse: ...

    def register(self, name: str, email: str, password: str) -> AuthResponse: ...


class MemoryStorage:
    """Storage held in a dict. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage:
    """Storage persisted as a flat JSON object on disk."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = load_json_config(self.path)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        save_json_config(data, self.path)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            save_json_config(data, self.path)


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class SessionStore:
    """
    Holds the bearer token and user profile.

    Usage:
        session = SessionStore(JsonFileStorage(path))
        session.authenticator = AuthService(api)
        session.login("me@example.com", "secret")
        session.user_id()
    """

    def __init__(
        self,
        storage: Storage,
        notifier: Notifier | None = None,
        on_expired: Callable[[], None] | None = None,
        authenticator: Authenticator | None = None,
    ) -> None:
        """
        Initialize the store. Nothing is read until load() or first access.

        Args:
            storage: Where the token and profile are persisted
            notifier: Receives the session-expired notification
            on_expired: Called once when a rejected token forces a logout;
                front ends use it to return to the login screen
            authenticator: Backend login/register calls
        """
        self._storage = storage
        self._notifier = notifier
        self.on_expired = on_expired
        self.authenticator = authenticator
        self._state = SessionState.UNINITIALIZED
        self._token: str | None = None
        self._user: User | None = None
        self._lock = threading.Lock()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_authenticated(self) -> bool:
        self._ensure_loaded()
        return self._state is SessionState.AUTHENTICATED

    @property
    def token(self) -> str | None:
        self._ensure_loaded()
        return self._token

    @property
    def user(self) -> User | None:
        self._ensure_loaded()
        return self._user

    def load(self) -> SessionState:
        """Read the persisted session. Both keys must be present and valid."""
        token = self._storage.get(TOKEN_KEY)
        raw_user = self._storage.get(USER_KEY)
        user: User | None = None

        if token and raw_user:
            try:
                user = normalize_user(json.loads(raw_user))
            except (json.JSONDecodeError, ParseError) as e:
                logger.warning("Stored user profile is invalid: %s", e)

        with self._lock:
            if token and user is not None:
                self._token, self._user = token, user
                self._state = SessionState.AUTHENTICATED
            else:
                self._token, self._user = None, None
                self._state = SessionState.UNAUTHENTICATED
        logger.debug("Session loaded: %s", self._state.value)
        return self._state

    def user_id(self) -> str:
        """Get the signed-in user's id.

        Raises:
            UnauthenticatedError: If there is no valid session
        """
        user = self.user
        if user is None or not user.id:
            raise UnauthenticatedError("User not authenticated")
        return user.id

    def save(self, auth: AuthResponse) -> None:
        """Persist token and profile together and mark the session signed in."""
        with self._lock:
            self._storage.set(TOKEN_KEY, auth.token)
            self._storage.set(USER_KEY, json.dumps(auth.user.to_dict()))
            self._token, self._user = auth.token, auth.user
            self._state = SessionState.AUTHENTICATED
        logger.info("Signed in as user %s", auth.user.id)

    def login(self, email: str, password: str) -> AuthResponse:
        auth = self._require_authenticator().login(email, password)
        self.save(auth)
        return auth

    def register(self, name: str, email: str, password: str) -> AuthResponse:
        auth = self._require_authenticator().register(name, email, password)
        self.save(auth)
        return auth

    def logout(self) -> None:
        """Clear the persisted session. The backend is not contacted."""
        self._clear()
        logger.info("Signed out")

    def expire(self) -> bool:
        """Force a logout after the backend rejected the token.

        Only the first call for a given session notifies and fires
        on_expired; parallel requests failing with the same token do not
        repeat it.

        Returns:
            True if this call ended the session
        """
        self._ensure_loaded()
        with self._lock:
            was_signed_in = self._token is not None
            self._clear_locked()
        if not was_signed_in:
            return False

        logger.warning("Session expired, token rejected by backend")
        if self._notifier is not None:
            self._notifier.error(SESSION_EXPIRED)
        if self.on_expired is not None:
            self.on_expired()
        return True

    def _clear(self) -> None:
        with self._lock:
            self._clear_locked()

    def _clear_locked(self) -> None:
        self._storage.remove(TOKEN_KEY)
        self._storage.remove(USER_KEY)
        self._token, self._user = None, None
        self._state = SessionState.UNAUTHENTICATED

    def _ensure_loaded(self) -> None:
        if self._state is SessionState.UNINITIALIZED:
            self.load()

    def _require_authenticator(self) -> Authenticator:
        if self.authenticator is None:
            raise RuntimeError("SessionStore has no authenticator configured")
        return self.authenticator
