"""Failure types and the error translator shared by every formula."""
from __future__ import annotations

import logging
from typing import NoReturn

LOGGER = logging.getLogger("openai_pack.errors")

QUOTA_EXCEEDED_MESSAGE = (
    "You exceeded your current OpenAI API quota. Please check your plan and "
    "billing details. For help, see https://help.openai.com/en/articles/"
    "6891831-error-code-429-you-exceeded-your-current-quota-please-check-your-plan-and-billing-details"
)


class PackError(Exception):
    """Base class for failures raised by this package."""


class UserVisibleError(PackError):
    """A failure whose message is meant to be shown to the person calling the formula."""


class ValidationError(UserVisibleError):
    """Bad formula input, reported before any network call."""


class RemoteError(PackError):
    """The remote API answered with a non-success status or an unusable body."""

    def __init__(
        self,
        status_code: int,
        message: str | None = None,
        error_type: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.error_type = error_type
        super().__init__(f"HTTP {status_code}: {message or 'no error message'}")


class NetworkError(PackError):
    """The request never produced an HTTP response (DNS, connect, timeout)."""


def handle_error(error: Exception) -> NoReturn:
    """
    Translate a failed formula call.

    Remote 400s carrying a message and quota exhaustion become
    ``UserVisibleError``; everything else is re-raised unchanged.

    Args:
        error: The exception raised while executing the formula.
    """
    if isinstance(error, RemoteError):
        if error.status_code == 400 and error.message:
            raise UserVisibleError(error.message) from error
        if error.status_code == 429 and error.error_type == "insufficient_quota":
            raise UserVisibleError(QUOTA_EXCEEDED_MESSAGE) from error
        LOGGER.debug("Propagating remote error unchanged: %s", error)
    raise error
