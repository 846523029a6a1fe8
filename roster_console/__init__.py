"""Student roster console: a Flask front end for the student records REST API."""

__version__ = "0.1.0"
