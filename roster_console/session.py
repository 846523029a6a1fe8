"""Per-browser authentication state: the signed-in user and the stored token."""

from typing import Iterable, Optional

import requests
import structlog
from pydantic import ValidationError

from .api import AuthApi
from .errors import SessionExpired, error_message
from .config import get_settings
from .http_client import ACCESS_TOKEN_KEY, RESTORED_KEY, USER_KEY, SessionStorage
from .models import RegisterForm, User

logger = structlog.get_logger(__name__)

LOGIN_ROUTE = "/login"

LOGIN_FAILED = "Login failed. Please check your credentials."
REGISTER_FAILED = "Registration failed. Please try again."


def safe_next(location: Optional[str]) -> Optional[str]:
    """Only local paths are followed after login."""
    if location and location.startswith("/") and not location.startswith("//"):
        return location
    return None


class SessionStore:
    """Holds ``user``/``loading``/``error`` for one browser session.

    The in-memory user and the persisted token are kept consistent: every path
    that drops one drops the other.
    """

    def __init__(self, auth_api: AuthApi, storage: SessionStorage, default_landing: Optional[str] = None):
        self.auth_api = auth_api
        self.storage = storage
        self.default_landing = default_landing or get_settings().default_landing
        self.user: Optional[User] = None
        self.loading = True
        self.error: Optional[str] = None
        auth_api.client.on_expired = self._forget_user

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.is_admin

    def has_role(self, roles: Optional[Iterable[str]]) -> bool:
        if self.user is None:
            return False
        if roles is None:
            return True
        return self.user.role.value in {getattr(r, "value", r) for r in roles}

    def restore(self):
        """Validate a persisted token; any failure just leaves the session logged out.

        The token is checked against ``/auth/me`` on the first page load of a
        browser session. Later loads reuse the user recorded by that check, and
        expiry is then noticed by the API client's refresh handling.
        """
        token = self.storage.get(ACCESS_TOKEN_KEY)
        try:
            if not token:
                self._clear()
            elif self.storage.get(RESTORED_KEY) and self.storage.get(USER_KEY):
                self.user = User.model_validate(self.storage.get(USER_KEY))
            else:
                self._remember(self.auth_api.get_current_user(token))
        except (requests.RequestException, SessionExpired, ValidationError) as exc:
            logger.info("session_restore_failed", error=type(exc).__name__)
            self._clear()
        finally:
            self.loading = False

    def login(self, username: str, password: str, next_location: Optional[str] = None) -> str:
        """Sign in and return where to go next."""
        try:
            result = self.auth_api.login(username, password)
        except requests.RequestException as exc:
            self.error = error_message(exc, LOGIN_FAILED)
            logger.info("login_failed", username=username)
            raise
        self.storage.set(ACCESS_TOKEN_KEY, result.access_token)
        self._remember(result.user)
        self.error = None
        logger.info("login_succeeded", username=username, role=result.user.role.value)
        return safe_next(next_location) or self.default_landing

    def register(self, fields: RegisterForm, next_location: Optional[str] = None) -> str:
        """Create the account, then sign in with the same credentials."""
        try:
            self.auth_api.register(fields)
        except requests.RequestException as exc:
            self.error = error_message(exc, REGISTER_FAILED)
            logger.info("register_failed", username=fields.username)
            raise
        logger.info("registered", username=fields.username)
        return self.login(fields.username, fields.password, next_location)

    def logout(self) -> str:
        if self.storage.get(ACCESS_TOKEN_KEY):
            try:
                self.auth_api.logout()
            except (requests.RequestException, SessionExpired) as exc:
                logger.warning("server_logout_failed", error=type(exc).__name__)
        self._clear()
        logger.info("logged_out")
        return LOGIN_ROUTE

    def _remember(self, user: User):
        self.storage.set(USER_KEY, user.model_dump(mode="json"))
        self.storage.set(RESTORED_KEY, True)
        self.user = user

    def _forget_user(self):
        self.user = None

    def _clear(self):
        self.storage.clear_auth()
        self.user = None
