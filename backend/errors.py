"""
errors.py
=========
Client-facing exception types. Each carries the HTTP status code it is
reported with; main.py turns them into the fail envelope.
"""

from typing import Optional


class ClientError(Exception):
    status_code = 400

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InputError(ClientError):
    """Schema, business-rule or image-decode failure."""
    status_code = 400


class InvalidCredentialsError(InputError):
    def __init__(self):
        super().__init__("Invalid email or password")


class AuthenticationError(ClientError):
    """Missing, malformed or expired session token."""
    status_code = 401


class NotFoundError(ClientError):
    status_code = 404


class PayloadTooLargeError(ClientError):
    status_code = 413
