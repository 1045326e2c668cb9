"""Exceptions raised by the snapshot webhook."""

from pydantic import ValidationError


class WebhookError(Exception):
    """Base exception for webhook errors."""

    pass


class AuthenticationError(WebhookError):
    """Failed to authenticate against the Kubernetes API.

    Raised when no usable credentials are found or the API server
    cannot be reached while connecting.
    """

    pass


class ListerError(WebhookError):
    """Existing classes could not be enumerated.

    Raised by a lister when the read of committed resources fails.
    The message carries the underlying failure text.
    """

    pass


def error_message(err: Exception) -> str:
    """Render an exception as a one-line message for operators.

    Validation errors are reduced to ``location: reason`` pairs, without
    pydantic's documentation links.
    """
    if isinstance(err, ValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in detail['loc'])}: {detail['msg']}"
            if detail["loc"]
            else detail["msg"]
            for detail in err.errors()
        )
    return str(err)
