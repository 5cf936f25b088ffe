"""Errors raised while handling an extender request."""

from __future__ import annotations


class ExtenderError(Exception):
    """Base error; ``status_code`` is the HTTP status returned to the scheduler."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EmptyRequestError(ExtenderError):
    status_code = 400


class MalformedRequestError(ExtenderError):
    status_code = 400


class PriorityError(ExtenderError):
    """A scoring method failed for the request."""

    status_code = 500

    def __init__(self, method: str, cause: BaseException) -> None:
        super().__init__(f"priority method {method} failed: {cause}")
        self.method = method
        self.cause = cause


class EncodingError(ExtenderError):
    status_code = 500
