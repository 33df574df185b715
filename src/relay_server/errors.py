from __future__ import annotations


class ValidationError(ValueError):
    """A required request field is missing or malformed (client error)."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
