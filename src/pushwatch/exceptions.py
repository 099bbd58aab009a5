"""Exceptions for pushwatch."""

from __future__ import annotations

from fastapi import status
from safir.fastapi import ClientRequestError
from safir.models import ErrorLocation

__all__ = [
    "ActionNotFoundError",
    "ActionNotTriggerableError",
]


class ActionNotFoundError(ClientRequestError):
    """The named action was not found."""

    error = "action_not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, action: str) -> None:
        self.action = action
        msg = f"Action {action} not found"
        super().__init__(msg, ErrorLocation.path, ["action"])


class ActionNotTriggerableError(Exception):
    """An action was asked to schedule while it could not be triggered."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"Action {action} is not triggerable")
