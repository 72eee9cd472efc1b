"""
Application package initializer.

The backend is organised into logical pieces: ``core`` holds settings,
database access, logging and security helpers; ``schemas`` holds the
pydantic payload models; ``services`` holds the business logic for
users, pins, media and music search; ``api`` wires the services to
HTTP routes.
"""

from .main import app  # noqa: F401
