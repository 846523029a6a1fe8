"""Console pages and form handlers."""

import time

import requests
from flask import Blueprint, flash, g, jsonify, redirect, render_template_string, request, url_for

from .guard import login_required
from .models import GRADES, ROLES, LoginForm, RegisterForm, Role, validate_form
from .roster import FormState, StudentDialog
from .session import safe_next
from .templates import PAGE

bp = Blueprint("console", __name__)

ADMIN = [Role.ADMIN.value]


def render(view, **ctx):
    ctx.setdefault("auth", g.get("auth"))
    return render_template_string(
        PAGE, view=view, grades=GRADES, roles=ROLES, now=time.strftime("%Y-%m-%d %H:%M:%S"), **ctx
    )


def flash_notices(notices):
    for notice in notices:
        flash(notice.message, notice.category)


def dashboard_url(**params):
    query = request.values.get("q") or None
    return url_for("console.dashboard", q=query, **params)


@bp.route("/health")
def health():
    return jsonify({"status": "ok"}), 200


@bp.route("/", methods=["GET"])
def index():
    if g.auth.is_authenticated:
        return redirect(g.auth.default_landing)
    return redirect(url_for("console.login"))


# --------- Auth ----------
@bp.route("/login", methods=["GET", "POST"])
def login():
    next_location = safe_next(request.values.get("next"))
    if request.method == "GET":
        if g.auth.is_authenticated:
            return redirect(next_location or g.auth.default_landing)
        return render("login", form=FormState(values={}), next=next_location)

    raw = request.form.to_dict()
    data, errors = validate_form(LoginForm, raw)
    form = FormState(values={"username": raw.get("username", "")})
    if errors:
        return render("login", form=form.fail(errors), next=next_location), 400
    try:
        target = g.auth.login(data.username, data.password, next_location)
    except requests.RequestException:
        return render("login", form=form, next=next_location), 401
    flash("Logged in", "success")
    return redirect(target)


@bp.route("/register", methods=["GET", "POST"])
def register():
    next_location = safe_next(request.values.get("next"))
    if request.method == "GET":
        return render("register", form=FormState(values={"role": Role.USER.value}), next=next_location)

    raw = request.form.to_dict()
    data, errors = validate_form(RegisterForm, raw)
    form = FormState(values={k: v for k, v in raw.items() if k != "password"})
    if errors:
        return render("register", form=form.fail(errors), next=next_location), 400
    try:
        target = g.auth.register(data, next_location)
    except requests.RequestException:
        return render("register", form=form, next=next_location), 400
    flash("Account created", "success")
    return redirect(target)


@bp.route("/logout")
def logout():
    target = g.auth.logout()
    flash("Logged out", "info")
    return redirect(target)


@bp.route("/unauthorized")
def unauthorized():
    return render("unauthorized"), 403


# --------- Roster ----------
@bp.route("/dashboard", methods=["GET"])
@login_required()
def dashboard():
    roster = g.roster.load(request.args.get("q", ""))
    dialog = StudentDialog.closed()
    if g.auth.is_admin:
        if request.args.get("dialog") == "add":
            dialog = StudentDialog.open_add()
        elif request.args.get("edit"):
            student = roster.find(request.args["edit"])
            if student is None:
                flash("Student not found", "warning")
            else:
                dialog = StudentDialog.open_edit(student)
    pending = g.roster.pending_delete if g.auth.is_admin else None
    return render("dashboard", roster=roster, dialog=dialog, pending=pending)


@bp.route("/students", methods=["POST"])
@login_required(roles=ADMIN)
def create_student():
    dialog, notices = g.roster.save(StudentDialog.open_add(), request.form.to_dict())
    flash_notices(notices)
    if not dialog.is_open:
        return redirect(dashboard_url())
    roster = g.roster.load(request.values.get("q", ""))
    return render("dashboard", roster=roster, dialog=dialog, pending=None), 400


@bp.route("/students/<roll_number>/edit", methods=["POST"])
@login_required(roles=ADMIN)
def update_student(roll_number):
    roster = g.roster.load(request.values.get("q", ""))
    student = roster.find(roll_number)
    if student is None:
        flash("Student not found", "warning")
        return redirect(dashboard_url())
    dialog, notices = g.roster.save(StudentDialog.open_edit(student), request.form.to_dict())
    flash_notices(notices)
    if not dialog.is_open:
        return redirect(dashboard_url())
    return render("dashboard", roster=roster, dialog=dialog, pending=None), 400


@bp.route("/students/<roll_number>/delete", methods=["POST"])
@login_required(roles=ADMIN)
def stage_delete(roll_number):
    g.roster.stage_delete(roll_number, request.form.get("name") or roll_number)
    return redirect(dashboard_url())


@bp.route("/students/delete/confirm", methods=["POST"])
@login_required(roles=ADMIN)
def confirm_delete():
    flash_notices(g.roster.confirm_delete())
    return redirect(dashboard_url())


@bp.route("/students/delete/cancel", methods=["POST"])
@login_required(roles=ADMIN)
def cancel_delete():
    g.roster.cancel_delete()
    return redirect(dashboard_url())
