"""Exceptions and helpers that turn API failures into user-facing messages."""

from typing import Dict, List, Optional


class SessionExpired(Exception):
    """The access token was rejected and could not be refreshed."""

    def __init__(self, message: str = "Session expired", response=None):
        super().__init__(message)
        self.response = response


def _payload(exc) -> Optional[dict]:
    response = getattr(exc, "response", None)
    if response is None:
        return None
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def field_errors(exc) -> List[dict]:
    """Structured ``[{loc, msg}]`` validation failures carried by the response, if any."""
    data = _payload(exc)
    if data and isinstance(data.get("detail"), list):
        return [item for item in data["detail"] if isinstance(item, dict)]
    return []


def error_messages(exc, default: str) -> List[str]:
    """One message per field-level failure, else a single message, else ``default``."""
    items = field_errors(exc)
    if items:
        messages = []
        for item in items:
            loc = item.get("loc") or []
            field = loc[1] if len(loc) > 1 else "Field"
            messages.append(f"{field}: {item.get('msg') or 'Invalid value'}")
        return messages
    return [error_message(exc, default)]


def error_message(exc, default: str) -> str:
    """A single human-readable message for ``exc``."""
    data = _payload(exc)
    if data:
        detail = data.get("detail")
        if isinstance(detail, str) and detail:
            return detail
        message = data.get("message")
        if isinstance(message, str) and message:
            return message
        items = field_errors(exc)
        if items:
            return "; ".join(item.get("msg") or "Invalid value" for item in items)
    return default


def inline_errors(exc) -> Dict[str, str]:
    """Map field-level failures onto form field names (last ``loc`` element)."""
    errors = {}
    for item in field_errors(exc):
        loc = item.get("loc") or []
        if loc:
            errors.setdefault(str(loc[-1]), item.get("msg") or "Invalid value")
    return errors
