"""Errors surfaced to callers of the user directory."""
from __future__ import annotations

import traceback
from typing import Dict, Optional


class UserdeskError(Exception):
    """Base class for user-facing errors.

    Every instance records the call stack at the point it was created so that
    handlers further up can log where the failure originated even after the
    traceback has been discarded.
    """

    status_code = 500
    default_message = "An unexpected error occurred."
    default_action = "Contact support if the problem persists."

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        action: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.message = message or self.default_message
        self.action = action or self.default_action
        if status_code is not None:
            self.status_code = status_code
        self.stack = "".join(traceback.format_stack()[:-1])
        super().__init__(self.message)

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "message": self.message,
            "action": self.action,
            "status_code": self.status_code,
        }


class ValidationError(UserdeskError):
    """Input failed schema checks or conflicts with an existing user."""

    status_code = 400
    default_message = "A validation error occurred."
    default_action = "Adjust the submitted data and try again."


class NotFoundError(UserdeskError):
    """The requested record does not exist."""

    status_code = 404
    default_message = "The requested resource was not found."
    default_action = "Check that the identifier is spelled correctly."


__all__ = ["NotFoundError", "UserdeskError", "ValidationError"]
