"""HTTP client for the BudgetBuddy REST backend."""

import logging
from typing import TYPE_CHECKING, Any

import requests

from budgetbuddy.config import DEFAULT_API_BASE_URL, DEFAULT_API_TIMEOUT_MS
from budgetbuddy.errors import AuthenticationError, NetworkError, ParseError, error_for_status
from budgetbuddy.notifications import GENERIC_ERROR, NETWORK_ERROR, Notifier

if TYPE_CHECKING:
    from budgetbuddy.session import SessionStore

logger = logging.getLogger(__name__)


class ApiClient:
    """
    Client for the BudgetBuddy backend.

    Every request carries the session's bearer token when there is one.
    Failures are classified here, once, for the whole application:

    - 401 clears the session (see SessionStore.expire) and raises
      AuthenticationError
    - 400 and 404 raise without a notification, callers render an
      empty state
    - other statuses notify with the backend's message and raise
    - no response notifies a connectivity error and raises NetworkError
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = DEFAULT_API_TIMEOUT_MS / 1000,
        session_store: "SessionStore | None" = None,
        notifier: Notifier | None = None,
    ) -> None:
        """Initialize client with backend location and session."""
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session_store = session_store
        self.notifier = notifier or Notifier()
        self._session = requests.Session()
        self._session.headers.update({
            "Content-Type": "application/json",
        })

    def _auth_headers(self) -> dict[str, str]:
        token = self.session_store.token if self.session_store is not None else None
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    def request(
        self,
        method: str,
        endpoint: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make an API request and return the decoded JSON body.

        Returns:
            Decoded body, or None for empty responses

        Raises:
            ApiError: For non-2xx responses (subclass by status)
            NetworkError: If no response was received
            ParseError: If the body is not JSON
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        logger.debug("%s %s params=%s", method, url, params)

        try:
            response = self._session.request(
                method,
                url,
                json=json,
                params=params,
                headers=self._auth_headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("%s %s failed without response: %s", method, url, e)
            self.notifier.error(NETWORK_ERROR)
            raise NetworkError(str(e)) from e

        if response.status_code >= 400:
            self._raise_for_response(method, url, response)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"{method} {url} returned a non-JSON body") from e

    def _raise_for_response(self, method: str, url: str, response: requests.Response) -> None:
        status = response.status_code
        payload: Any = None
        try:
            payload = response.json()
        except ValueError:
            payload = None
        message = GENERIC_ERROR
        if isinstance(payload, dict) and payload.get("message"):
            message = str(payload["message"])

        error = error_for_status(status, message, payload)

        if isinstance(error, AuthenticationError):
            logger.warning("%s %s rejected with 401", method, url)
            if self.session_store is not None:
                self.session_store.expire()
            raise error

        if error.suppress_notification:
            logger.info("%s %s returned %d: %s", method, url, status, message)
        else:
            logger.error("%s %s returned %d: %s", method, url, status, message)
            self.notifier.error(message)
        raise error

    def get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, json: Any = None) -> Any:
        return self.request("POST", endpoint, json=json)

    def put(self, endpoint: str, json: Any = None) -> Any:
        return self.request("PUT", endpoint, json=json)

    def patch(self, endpoint: str, json: Any = None) -> Any:
        return self.request("PATCH", endpoint, json=json)

    def delete(self, endpoint: str) -> Any:
        return self.request("DELETE", endpoint)
