#!/usr/bin/env python3
"""
web_wrapper.py - Student roster console (Flask front end for the student records API)

- Signed-in users browse and search the student roster; admins add, edit and delete records.
- All data lives behind the REST API at ROSTER_API_URL; the console keeps only the access token
  and the backend's refresh cookie in the signed Flask session.
- Run:
    export ROSTER_API_URL=http://localhost:8000
    export ROSTER_PORT=8080
    python3 web_wrapper.py
  Or with Gunicorn:
    pip install .
    gunicorn web_wrapper:app --bind 0.0.0.0:$ROSTER_PORT
"""

from roster_console.config import get_settings
from roster_console.web import create_app

# --------- Configuration ----------
settings = get_settings()
PORT = settings.port

app = create_app(settings)

# Start server (bind to PORT when run directly)
if __name__ == "__main__":
    app.run(host="0.0.0.0", port=PORT, debug=False)
