import json
import os
import sys
from collections import namedtuple

import pytest
import requests

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from roster_console.config import Settings
from roster_console.http_client import ApiClient, SessionStorage
from roster_console.web import create_app

API = "http://api.test"

ADMIN_USER = {
    "username": "admin1",
    "email": "admin1@example.com",
    "full_name": "Admin One",
    "role": "admin",
    "disabled": False,
}
PLAIN_USER = {
    "username": "viewer",
    "email": "viewer@example.com",
    "full_name": "Plain Viewer",
    "role": "user",
    "disabled": False,
}

Call = namedtuple("Call", "method path headers json data")


def make_response(status=200, body=None):
    response = requests.Response()
    response.status_code = status
    response.url = API
    response.reason = "OK" if status < 400 else "Error"
    if body is None:
        response._content = b""
    else:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    return response


def student(name, roll_number, class_name="10A", grade="A"):
    return {
        "_id": f"id-{roll_number}",
        "name": name,
        "roll_number": roll_number,
        "class_name": class_name,
        "grade": grade,
        "created_at": "2024-01-01T00:00:00",
        "updated_at": "2024-01-01T00:00:00",
    }


class FakeBackend:
    """Stands in for ``requests.Session``.

    Each (method, path) holds a queue of responses; the last one keeps being
    served once the others are used up. Exceptions in the queue are raised;
    callables are called with the recorded request.
    """

    def __init__(self):
        self.cookies = requests.cookies.RequestsCookieJar()
        self.routes = {}
        self.calls = []
        self.closed = 0

    def on(self, method, path, *responses):
        self.routes[(method, path)] = list(responses)
        return self

    def request(self, method, url, headers=None, json=None, data=None):
        path = url[len(API):]
        call = Call(method, path, dict(headers or {}), json, data)
        self.calls.append(call)
        queue = self.routes.get((method, path))
        if not queue:
            return make_response(404, {"detail": "Not Found"})
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(call)
        return response

    def close(self):
        self.closed += 1

    def calls_to(self, method, path):
        return [c for c in self.calls if c.method == method and c.path == path]


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def storage():
    return SessionStorage({})


@pytest.fixture
def client(backend, storage):
    return ApiClient(API, storage, http=backend)


@pytest.fixture
def app(backend):
    settings = Settings(api_url=API, secret_key="test-secret", log_level="WARNING")
    app = create_app(settings, http_factory=lambda: backend)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def web(app):
    return app.test_client()


@pytest.fixture
def sign_in(web, backend):
    def _sign_in(user=ADMIN_USER, token="tok123"):
        backend.on("POST", "/api/v1/auth/me", make_response(200, user))
        with web.session_transaction() as sess:
            sess["access_token"] = token
        return web
    return _sign_in
