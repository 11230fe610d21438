# core/errors.py
"""
Error taxonomy for the users domain.

These are plain exceptions: they carry a message (and for validation, the
per-field messages) but know nothing about HTTP. core/exception_handlers.py
translates each kind to a status code and body.
"""
from typing import Dict


class UserApiError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ResourceNotFoundError(UserApiError):
    pass


class InvalidAgeError(UserApiError):
    pass


class InvalidDateRangeError(UserApiError):
    pass


class EmailAlreadyExistsError(UserApiError):
    pass


class PhoneNumberAlreadyExistsError(UserApiError):
    pass


class ValidationFailedError(UserApiError):
    """One entry per offending field, field name -> human readable message."""

    def __init__(self, errors: Dict[str, str]):
        super().__init__("Validation failed: " + ", ".join(sorted(errors)))
        self.errors = dict(errors)
