"""Domain errors raised by the school store and dashboard shell.

The HTTP layer maps them to status codes; nothing here is fatal to a session.
"""


class DashboardError(Exception):
    """Base exception for dashboard errors."""

    status_code = 400


class UnknownClassError(DashboardError):
    """No routine exists for the requested class."""

    status_code = 404


class NoteNotFoundError(DashboardError):
    """No note exists with the requested id."""

    status_code = 404


class InvalidFieldError(DashboardError):
    """A routine edit named a day or field outside the grid."""

    status_code = 422
