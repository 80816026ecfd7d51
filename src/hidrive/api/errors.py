"""Exception types raised by the HiDrive client."""

from __future__ import annotations


class HiDriveError(Exception):
    """Base class for errors raised by the client itself."""


class PreconditionError(HiDriveError, ValueError):
    """Raised when caller input is invalid, before any request is sent."""


class ServiceError(HiDriveError):
    """Raised when the API answers with an unexpected status code.

    HiDrive explains every failure in a ``{"code": ..., "msg": ...}`` body.
    The code is kept exactly as received: it is usually numeric, but the
    wire format allows strings, so it is never coerced to ``int``.
    """

    def __init__(self, status_code: int, code: object, message: str) -> None:
        text = f"HiDrive API error {code}"
        if message:
            text += f": {message}"
        super().__init__(text)
        self.status_code = status_code
        self.code = code
        self.message = message


class DecodeError(HiDriveError, ValueError):
    """Raised when a response body cannot be decoded."""
