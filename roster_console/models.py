"""Wire models for the student REST API and the console's form schemas."""

import enum
from datetime import datetime
from typing import ClassVar, Dict, Optional, Tuple, Type

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, ValidationError


class Grade(str, enum.Enum):
    A_PLUS = "A+"
    A = "A"
    B_PLUS = "B+"
    B = "B"
    C_PLUS = "C+"
    C = "C"
    D = "D"
    F = "F"


class Role(str, enum.Enum):
    ADMIN = "admin"
    USER = "user"


GRADES = [g.value for g in Grade]
ROLES = [r.value for r in Role]


class Student(BaseModel):
    """A student record as returned by the API."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    name: str
    roll_number: str
    class_name: str
    grade: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StudentCreate(BaseModel):
    name: str
    roll_number: str
    class_name: str
    grade: str


class StudentUpdate(BaseModel):
    # roll_number is the addressing key and is never part of an update
    name: Optional[str] = None
    class_name: Optional[str] = None
    grade: Optional[str] = None


class User(BaseModel):
    """The signed-in principal. ``role`` is the only authorization axis."""

    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: Role = Role.USER
    disabled: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class LoginResult(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: User


# --------- Form schemas ----------
class FormSchema(BaseModel):
    """Base for browser-submitted forms; ``messages`` maps a field to its error text."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    messages: ClassVar[Dict[str, str]] = {}


class StudentForm(FormSchema):
    name: str = Field(min_length=2)
    roll_number: str = Field(min_length=1)
    class_name: str = Field(min_length=1)
    grade: Grade

    messages: ClassVar[Dict[str, str]] = {
        "name": "Name must be at least 2 characters",
        "roll_number": "Roll number is required",
        "class_name": "Class is required",
        "grade": "Grade is required",
    }


class LoginForm(FormSchema):
    username: str = Field(min_length=1)
    password: str = Field(min_length=6)

    messages: ClassVar[Dict[str, str]] = {
        "username": "Username is required",
        "password": "Password must be at least 6 characters",
    }


class RegisterForm(FormSchema):
    username: str = Field(min_length=3)
    email: EmailStr
    full_name: str = Field(min_length=1)
    role: Role = Role.USER
    password: str = Field(min_length=6)

    messages: ClassVar[Dict[str, str]] = {
        "username": "Username must be at least 3 characters",
        "email": "Invalid email address",
        "full_name": "Full name is required",
        "role": "Role must be admin or user",
        "password": "Password must be at least 6 characters",
    }


def validate_form(schema: Type[FormSchema], raw: dict) -> Tuple[Optional[FormSchema], Dict[str, str]]:
    """Validate raw form input; returns ``(model, {})`` or ``(None, {field: message})``."""
    try:
        return schema.model_validate(raw), {}
    except ValidationError as exc:
        errors = {}
        for err in exc.errors():
            field = str(err["loc"][0]) if err["loc"] else "form"
            errors.setdefault(field, schema.messages.get(field, err["msg"]))
        return None, errors
