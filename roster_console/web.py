"""Flask application factory for the roster console."""

import logging

import requests
import structlog
from flask import Flask, flash, g, redirect, request, session, url_for

from .api import AuthApi, StudentApi
from .config import Settings, get_settings
from .errors import SessionExpired
from .http_client import ApiClient, SessionStorage
from .roster import RosterController
from .session import SessionStore
from .views import bp

UNGUARDED_ENDPOINTS = ("console.health", "static")


def configure_logging(level: str):
    log_level = getattr(logging, level.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def create_app(settings: Settings = None, http_factory=requests.Session) -> Flask:
    """Build the console app; ``http_factory`` makes the transport used to reach the API."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    logger = structlog.get_logger(__name__)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.config["ROSTER_SETTINGS"] = settings

    @app.before_request
    def open_session():
        if request.endpoint in UNGUARDED_ENDPOINTS:
            return None
        storage = SessionStorage(session)
        g.http = http_factory()
        client = ApiClient(settings.api_url, storage, http=g.http)
        g.auth = SessionStore(AuthApi(client), storage, default_landing=settings.default_landing)
        g.roster = RosterController(StudentApi(client), storage)
        g.auth.restore()
        return None

    @app.teardown_request
    def close_transport(exc):
        http = g.pop("http", None)
        if http is not None:
            http.close()

    @app.errorhandler(SessionExpired)
    def session_expired(exc):
        logger.info("session_expired", path=request.path)
        flash("Session expired, please log in again", "warning")
        return redirect(url_for("console.login"))

    app.register_blueprint(bp)
    logger.info("console_ready", api_url=settings.api_url)
    return app
