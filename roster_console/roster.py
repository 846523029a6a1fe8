"""Roster data flow: search filter, student dialogs and staged deletes.

Every successful mutation is followed by a full reload of the roster from the
API; nothing is patched locally.
"""

from dataclasses import dataclass, field, replace
from typing import List, Mapping, NamedTuple, Optional, Sequence, Tuple

import requests
import structlog

from .api import StudentApi
from .errors import error_messages, inline_errors
from .http_client import SessionStorage
from .models import Student, StudentCreate, StudentForm, StudentUpdate, validate_form

logger = structlog.get_logger(__name__)

PENDING_DELETE_KEY = "pending_delete"
STUDENT_FIELDS = ("name", "roll_number", "class_name", "grade")

LOAD_FAILED = "Failed to load students."
ADD_FAILED = "Failed to add student. Please try again."
UPDATE_FAILED = "Failed to update student. Please try again."
DELETE_FAILED = "Failed to delete student. Please try again."

IDLE = "idle"
SUBMITTING = "submitting"
ERROR = "error"

CLOSED = "closed"
ADD = "add"
EDIT = "edit"


class Notice(NamedTuple):
    category: str
    message: str


def filter_students(students: Sequence[Student], query: str) -> List[Student]:
    """Case-insensitive substring match on name or roll number."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(students)
    return [
        s for s in students
        if needle in s.name.lower() or needle in s.roll_number.lower()
    ]


@dataclass(frozen=True)
class Roster:
    students: List[Student] = field(default_factory=list)
    query: str = ""
    error: Optional[str] = None

    @property
    def visible(self) -> List[Student]:
        return filter_students(self.students, self.query)

    @property
    def state(self) -> str:
        if self.error:
            return "error"
        if not self.students:
            return "empty"
        if not self.visible:
            return "no_results"
        return "results"

    def find(self, roll_number: str) -> Optional[Student]:
        return next((s for s in self.students if s.roll_number == roll_number), None)


def _blank() -> dict:
    return {name: "" for name in STUDENT_FIELDS}


@dataclass(frozen=True)
class FormState:
    values: Mapping[str, str] = field(default_factory=_blank)
    errors: Mapping[str, str] = field(default_factory=dict)
    status: str = IDLE

    @property
    def submitting(self) -> bool:
        return self.status == SUBMITTING

    def edit(self, **values) -> "FormState":
        return replace(self, values={**self.values, **values})

    def submit(self) -> "FormState":
        return replace(self, errors={}, status=SUBMITTING)

    def fail(self, errors: Mapping[str, str]) -> "FormState":
        return replace(self, errors=dict(errors), status=ERROR)

    def reset(self) -> "FormState":
        return FormState()


@dataclass(frozen=True)
class StudentDialog:
    """closed -> open(add|edit) -> submitting -> closed on success, open with errors on failure."""

    mode: str = CLOSED
    editing: Optional[Student] = None
    form: FormState = field(default_factory=FormState)

    @classmethod
    def closed(cls) -> "StudentDialog":
        return cls()

    @classmethod
    def open_add(cls) -> "StudentDialog":
        return cls(mode=ADD)

    @classmethod
    def open_edit(cls, student: Student) -> "StudentDialog":
        values = {name: getattr(student, name) for name in STUDENT_FIELDS}
        return cls(mode=EDIT, editing=student, form=FormState(values=values))

    @property
    def is_open(self) -> bool:
        return self.mode != CLOSED

    @property
    def locked(self) -> Tuple[str, ...]:
        return ("roll_number",) if self.mode == EDIT else ()

    def close(self) -> "StudentDialog":
        return StudentDialog.closed()


class PendingDelete(NamedTuple):
    roll_number: str
    name: str


class RosterController:
    def __init__(self, student_api: StudentApi, storage: SessionStorage):
        self.student_api = student_api
        self.storage = storage

    def load(self, query: str = "") -> Roster:
        try:
            students = self.student_api.list_students()
        except requests.RequestException as exc:
            logger.warning("roster_load_failed", error=type(exc).__name__)
            return Roster(query=query, error=error_messages(exc, LOAD_FAILED)[0])
        return Roster(students=students, query=query)

    def save(self, dialog: StudentDialog, raw: Mapping[str, str]) -> Tuple[StudentDialog, List[Notice]]:
        """Validate and submit ``dialog``; the dialog comes back closed only on success."""
        values = {name: raw.get(name) or "" for name in STUDENT_FIELDS}
        if dialog.mode == EDIT:
            # the business key is whatever the record already has
            values["roll_number"] = dialog.editing.roll_number
        form = dialog.form.edit(**values)

        data, errors = validate_form(StudentForm, values)
        if errors:
            return replace(dialog, form=form.fail(errors)), []

        form = form.submit()
        payload = data.model_dump(mode="json")
        try:
            if dialog.mode == ADD:
                student = self.student_api.create_student(StudentCreate(**payload))
                logger.info("student_created", roll_number=student.roll_number)
                notice = Notice("success", "Student added successfully")
            else:
                roll_number = dialog.editing.roll_number
                self.student_api.update_student(
                    roll_number,
                    StudentUpdate(name=payload["name"], class_name=payload["class_name"], grade=payload["grade"]),
                )
                logger.info("student_updated", roll_number=roll_number)
                notice = Notice("success", "Student updated successfully")
        except requests.RequestException as exc:
            default = ADD_FAILED if dialog.mode == ADD else UPDATE_FAILED
            logger.warning("student_save_failed", mode=dialog.mode, error=type(exc).__name__)
            notices = [Notice("danger", m) for m in error_messages(exc, default)]
            return replace(dialog, form=form.fail(inline_errors(exc))), notices
        return dialog.close(), [notice]

    @property
    def pending_delete(self) -> Optional[PendingDelete]:
        staged = self.storage.get(PENDING_DELETE_KEY)
        return PendingDelete(**staged) if staged else None

    def stage_delete(self, roll_number: str, name: str) -> PendingDelete:
        pending = PendingDelete(roll_number, name)
        self.storage.set(PENDING_DELETE_KEY, pending._asdict())
        return pending

    def cancel_delete(self):
        self.storage.remove(PENDING_DELETE_KEY)

    def confirm_delete(self) -> List[Notice]:
        pending = self.pending_delete
        self.storage.remove(PENDING_DELETE_KEY)
        if pending is None:
            return [Notice("warning", "No student selected for deletion")]
        try:
            self.student_api.delete_student(pending.roll_number)
        except requests.RequestException as exc:
            logger.warning("student_delete_failed", roll_number=pending.roll_number, error=type(exc).__name__)
            return [Notice("danger", m) for m in error_messages(exc, DELETE_FAILED)]
        logger.info("student_deleted", roll_number=pending.roll_number)
        return [Notice("success", f"Student {pending.name} deleted")]
