"""
Domain error types.

Raised where a problem is detected and left to propagate; the boundary
layer (HTTP handler, CLI) decides how to present them.
"""


class ExpressError(Exception):
    """Base error carrying a message and an HTTP-style status code."""

    status = 500

    def __init__(self, message: str, status: int = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class BadRequestError(ExpressError):
    """Caller supplied unusable input."""

    status = 400

    def __init__(self, message: str = "Bad Request"):
        super().__init__(message)


class NotFoundError(ExpressError):
    """Addressed record does not exist."""

    status = 404

    def __init__(self, message: str = "Not Found"):
        super().__init__(message)


class UnknownFieldError(BadRequestError):
    """A field has no entry in the column mapping."""

    def __init__(self, field: str):
        super().__init__(f"Unknown field: {field}")
        self.field = field
