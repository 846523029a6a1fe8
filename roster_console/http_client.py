"""HTTP client for the student API.

Attaches the stored bearer token to every request, keeps the backend's
cookies (the refresh token lives there) across browser requests, and on a
401 makes exactly one refresh attempt before replaying the request once.
"""

from typing import Callable, Optional

import requests
import structlog

from .errors import SessionExpired

logger = structlog.get_logger(__name__)

ACCESS_TOKEN_KEY = "access_token"
USER_KEY = "user"
COOKIES_KEY = "api_cookies"
# set once the stored token has been checked against /auth/me
RESTORED_KEY = "session_restored"

REFRESH_PATH = "/api/v1/auth/refresh"
# a 401 from these means bad credentials, not an expired session
NO_REFRESH_PATHS = ("/api/v1/auth/login", "/api/v1/auth/register", REFRESH_PATH)


class SessionStorage:
    """Persisted console state on top of any mutable mapping (the Flask session in production)."""

    def __init__(self, backend):
        self.backend = backend

    def get(self, key, default=None):
        return self.backend.get(key, default)

    def set(self, key, value):
        self.backend[key] = value

    def remove(self, key):
        self.backend.pop(key, None)

    def clear_auth(self):
        """Token, user and backend cookies always go together."""
        for key in (ACCESS_TOKEN_KEY, USER_KEY, COOKIES_KEY, RESTORED_KEY):
            self.remove(key)


class ApiClient:
    def __init__(self, base_url: str, storage: SessionStorage, http=None,
                 on_expired: Optional[Callable[[], None]] = None):
        self.base_url = base_url.rstrip("/")
        self.storage = storage
        self.http = http if http is not None else requests.Session()
        self.on_expired = on_expired
        requests.utils.add_dict_to_cookiejar(self.http.cookies, storage.get(COOKIES_KEY) or {})

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _headers(self, extra=None) -> dict:
        headers = {"Accept": "application/json"}
        token = self.storage.get(ACCESS_TOKEN_KEY)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if extra:
            headers.update(extra)
        return headers

    def _save_cookies(self):
        cookies = requests.utils.dict_from_cookiejar(self.http.cookies)
        if cookies:
            self.storage.set(COOKIES_KEY, cookies)

    def _send(self, method: str, path: str, json=None, data=None, headers=None) -> requests.Response:
        if callable(json):
            # rebuilt per attempt so a replay sees the refreshed token
            json = json()
        response = self.http.request(
            method, self.url(path), headers=self._headers(headers), json=json, data=data
        )
        self._save_cookies()
        return response

    def request(self, method: str, path: str, json=None, data=None, headers=None) -> requests.Response:
        response = self._send(method, path, json=json, data=data, headers=headers)
        if response.status_code == 401 and path not in NO_REFRESH_PATHS:
            self.refresh()
            response = self._send(method, path, json=json, data=data, headers=headers)
            if response.status_code == 401:
                logger.warning("retried_request_rejected", method=method, path=path)
                self.expire()
                raise SessionExpired("Session expired", response=response)
        response.raise_for_status()
        return response

    def refresh(self) -> str:
        """Exchange the refresh cookie for a new access token and store it."""
        try:
            response = self.http.request("POST", self.url(REFRESH_PATH), json={})
            self._save_cookies()
            response.raise_for_status()
            token = response.json()["access_token"]
        except (requests.RequestException, KeyError, TypeError, ValueError) as exc:
            logger.info("token_refresh_failed", error=str(exc))
            self.expire()
            raise SessionExpired("Session expired") from exc
        self.storage.set(ACCESS_TOKEN_KEY, token)
        logger.info("token_refreshed")
        return token

    def expire(self):
        self.storage.clear_auth()
        if self.on_expired is not None:
            self.on_expired()

    def get(self, path: str, **kwargs) -> requests.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> requests.Response:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> requests.Response:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs) -> requests.Response:
        return self.request("DELETE", path, **kwargs)
