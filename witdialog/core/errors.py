"""Errors raised by the convenience API."""

from typing import Any


class WitAPIError(Exception):
    """
    Raised when the service reports an error for a request whose caller expects a value.
    """

    def __init__(self, code: str, payload: Any = None) -> None:
        super().__init__(f"Wit API error: {code}")
        self.code = code
        self.payload = payload
