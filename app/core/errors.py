"""
Application errors shared by the store, the HTTP layer and the flow controller.
"""
from typing import List, Optional


class ValentineError(Exception):
    """Base exception for the application."""
    pass


class ValidationError(ValentineError):
    """Raised when a quiz is incomplete or malformed."""

    def __init__(self, messages: Optional[List[str]] = None):
        self.messages = list(messages or [])
        super().__init__("; ".join(self.messages) or "Invalid quiz")


class NotFoundError(ValentineError):
    """Raised when a share link does not resolve to a stored quiz."""

    def __init__(self, message: str = "Quiz not found or link expired"):
        super().__init__(message)


class StoreError(ValentineError):
    """Raised when the record store or blob store fails."""
    pass


class UploadError(ValentineError):
    """Raised for oversized, unsupported or unconvertible images."""
    pass
