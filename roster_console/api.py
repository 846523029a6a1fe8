"""Student and auth endpoints of the REST API.

Each call returns the decoded payload; transport errors propagate unchanged.
"""

from typing import List
from urllib.parse import quote

from .http_client import ACCESS_TOKEN_KEY, ApiClient
from .models import LoginResult, RegisterForm, Student, StudentCreate, StudentUpdate, User

STUDENTS_PATH = "/api/v1/students"
AUTH_PATH = "/api/v1/auth"


def _student_path(roll_number: str) -> str:
    return f"{STUDENTS_PATH}/{quote(roll_number, safe='')}"


class StudentApi:
    def __init__(self, client: ApiClient):
        self.client = client

    def list_students(self) -> List[Student]:
        # server order is kept as-is
        return [Student.model_validate(item) for item in self.client.get(STUDENTS_PATH).json()]

    def create_student(self, data: StudentCreate) -> Student:
        response = self.client.post(STUDENTS_PATH, json=data.model_dump())
        return Student.model_validate(response.json())

    def update_student(self, roll_number: str, data: StudentUpdate) -> Student:
        response = self.client.put(_student_path(roll_number), json=data.model_dump(exclude_none=True))
        return Student.model_validate(response.json())

    def delete_student(self, roll_number: str) -> dict:
        self.client.delete(_student_path(roll_number))
        return {"success": True}


class AuthApi:
    def __init__(self, client: ApiClient):
        self.client = client

    def login(self, username: str, password: str) -> LoginResult:
        response = self.client.post(
            f"{AUTH_PATH}/login",
            data={"username": username, "password": password},
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        return LoginResult.model_validate(response.json())

    def register(self, fields: RegisterForm) -> dict:
        response = self.client.post(f"{AUTH_PATH}/register", json=fields.model_dump(mode="json"))
        return response.json() if response.content else {}

    def refresh_token(self) -> dict:
        return self.client.post(f"{AUTH_PATH}/refresh").json()

    def logout(self) -> dict:
        response = self.client.post(f"{AUTH_PATH}/logout")
        return response.json() if response.content else {}

    def get_current_user(self, token: str) -> User:
        def body():
            return {"access_token": self.client.storage.get(ACCESS_TOKEN_KEY) or token}

        response = self.client.post(f"{AUTH_PATH}/me", json=body)
        return User.model_validate(response.json())
