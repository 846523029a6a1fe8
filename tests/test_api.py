from urllib.parse import urlencode

import pytest
import requests

from conftest import ADMIN_USER, make_response, student
from roster_console.api import AuthApi, StudentApi
from roster_console.models import RegisterForm, StudentCreate, StudentUpdate


@pytest.fixture
def students(client):
    return StudentApi(client)


@pytest.fixture
def auth(client):
    return AuthApi(client)


def test_list_students_keeps_server_order(students, backend):
    backend.on("GET", "/api/v1/students", make_response(200, [student("Zed", "R9"), student("Amy", "R1")]))

    result = students.list_students()

    assert [s.roll_number for s in result] == ["R9", "R1"]
    assert result[0].id == "id-R9"
    assert result[0].created_at.year == 2024


def test_create_student_posts_json(students, backend):
    backend.on("POST", "/api/v1/students", make_response(201, student("Amy", "R1", grade="B+")))

    created = students.create_student(StudentCreate(name="Amy", roll_number="R1", class_name="10A", grade="B+"))

    assert created.grade == "B+"
    assert backend.calls[0].json == {"name": "Amy", "roll_number": "R1", "class_name": "10A", "grade": "B+"}


def test_update_student_addresses_by_roll_number(students, backend):
    backend.on("PUT", "/api/v1/students/R%2F1", make_response(200, student("Amy B", "R/1")))

    updated = students.update_student("R/1", StudentUpdate(name="Amy B"))

    assert updated.name == "Amy B"
    assert backend.calls[0].json == {"name": "Amy B"}


def test_delete_student_acknowledges(students, backend):
    backend.on("DELETE", "/api/v1/students/R1", make_response(204))

    assert students.delete_student("R1") == {"success": True}


def test_delete_student_propagates_http_error(students, backend):
    backend.on("DELETE", "/api/v1/students/R1", make_response(404, {"detail": "Student not found"}))

    with pytest.raises(requests.HTTPError):
        students.delete_student("R1")


def test_login_sends_form_encoded_credentials(auth, backend):
    backend.on("POST", "/api/v1/auth/login", make_response(200, {"access_token": "tok123", "user": ADMIN_USER}))

    result = auth.login("admin1", "secret1")

    call = backend.calls[0]
    assert urlencode(call.data) == "username=admin1&password=secret1"
    assert call.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert call.json is None
    assert result.access_token == "tok123"
    assert result.user.is_admin


def test_register_posts_fields(auth, backend):
    backend.on("POST", "/api/v1/auth/register", make_response(201, {"username": "newbie"}))
    fields = RegisterForm(username="newbie", email="n@example.com", full_name="New Bie", password="secret1")

    auth.register(fields)

    assert backend.calls[0].json == {
        "username": "newbie",
        "email": "n@example.com",
        "full_name": "New Bie",
        "role": "user",
        "password": "secret1",
    }


def test_get_current_user_posts_token(auth, backend):
    backend.on("POST", "/api/v1/auth/me", make_response(200, ADMIN_USER))

    user = auth.get_current_user("tok123")

    assert user.username == "admin1"
    assert backend.calls[0].json == {"access_token": "tok123"}


def test_logout_tolerates_empty_body(auth, backend):
    backend.on("POST", "/api/v1/auth/logout", make_response(204))

    assert auth.logout() == {}


def test_refresh_token_returns_payload_without_retrying(auth, backend):
    backend.on("POST", "/api/v1/auth/refresh", make_response(200, {"access_token": "fresh"}))

    assert auth.refresh_token() == {"access_token": "fresh"}
    assert len(backend.calls) == 1


def test_register_tolerates_empty_body(auth, backend):
    backend.on("POST", "/api/v1/auth/register", make_response(201))
    fields = RegisterForm(username="newbie", email="n@example.com", full_name="New Bie", password="secret1")

    assert auth.register(fields) == {}


def test_get_current_user_replays_with_refreshed_token(auth, backend, storage):
    storage.set("access_token", "old")

    def me(call):
        if call.json == {"access_token": "new"}:
            return make_response(200, ADMIN_USER)
        return make_response(401, {"detail": "Invalid token"})

    backend.on("POST", "/api/v1/auth/me", me)
    backend.on("POST", "/api/v1/auth/refresh", make_response(200, {"access_token": "new"}))

    user = auth.get_current_user("old")

    assert user.username == "admin1"
    assert [c.json for c in backend.calls_to("POST", "/api/v1/auth/me")] == [
        {"access_token": "old"},
        {"access_token": "new"},
    ]
