"""Navigation guard for signed-in and role-restricted pages.

This only shapes what the console shows; the API enforces authorization.
"""

from functools import wraps
from typing import NamedTuple, Optional, Sequence

from flask import flash, g, redirect, render_template_string, request, url_for

from .templates import PAGE

PENDING = "pending"
LOGIN = "login"
UNAUTHORIZED = "unauthorized"
ALLOW = "allow"


class Access(NamedTuple):
    outcome: str
    location: Optional[str] = None


def check_access(auth, roles: Optional[Sequence[str]] = None, location: Optional[str] = None) -> Access:
    """Decide what a page request gets.

    ``PENDING`` only applies to a session whose ``restore()`` has not finished.
    The app factory restores before any view runs, so console pages never see it.
    """
    if auth.loading:
        return Access(PENDING)
    if not auth.is_authenticated:
        return Access(LOGIN, location)
    if roles is not None and not auth.has_role(roles):
        return Access(UNAUTHORIZED)
    return Access(ALLOW)


def requested_location() -> str:
    query = request.query_string.decode()
    return f"{request.path}?{query}" if query else request.path


def login_required(roles=None):
    def deco(f):
        @wraps(f)
        def wrapped(*args, **kwargs):
            access = check_access(g.auth, roles, requested_location())
            if access.outcome == PENDING:
                return render_template_string(PAGE, view="loading", auth=g.auth)
            if access.outcome == LOGIN:
                flash("Please login first", "warning")
                return redirect(url_for("console.login", next=access.location))
            if access.outcome == UNAUTHORIZED:
                return redirect(url_for("console.unauthorized"))
            return f(*args, **kwargs)
        return wrapped
    return deco
