from unittest.mock import MagicMock

import pytest

from conftest import ADMIN_USER, PLAIN_USER
from roster_console.guard import ALLOW, LOGIN, PENDING, UNAUTHORIZED, check_access
from roster_console.http_client import SessionStorage
from roster_console.models import User
from roster_console.session import SessionStore


def make_store(user=None, loading=False):
    store = SessionStore(MagicMock(), SessionStorage({}))
    store.loading = loading
    store.user = User.model_validate(user) if user else None
    return store


def test_loading_session_waits():
    assert check_access(make_store(loading=True), None, "/dashboard").outcome == PENDING


def test_unauthenticated_goes_to_login_with_location():
    access = check_access(make_store(), None, "/dashboard?q=amy")

    assert access.outcome == LOGIN
    assert access.location == "/dashboard?q=amy"


@pytest.mark.parametrize("user, roles, outcome", [
    (PLAIN_USER, None, ALLOW),
    (PLAIN_USER, ["admin"], UNAUTHORIZED),
    (ADMIN_USER, ["admin"], ALLOW),
    (ADMIN_USER, ["admin", "user"], ALLOW),
])
def test_role_check(user, roles, outcome):
    assert check_access(make_store(user), roles, "/x").outcome == outcome
