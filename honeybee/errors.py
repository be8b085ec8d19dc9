# HONEYBEE/backend/honeybee/errors.py


class HoneyBeeError(Exception):
    """Base error; `message` is safe to show to the end user, `status_code` is its HTTP translation"""

    default_message = "An error occurred"
    status_code = 500

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentials(HoneyBeeError):
    """Sign-in matched no active employee. Never says which field was wrong."""

    default_message = "Invalid name or password"
    status_code = 401


class SessionInvalid(HoneyBeeError):
    """Stored session no longer resolves to an active employee"""

    default_message = "Please sign in again"
    status_code = 401


class BackendUnavailable(HoneyBeeError):
    """The record store could not complete a call"""

    default_message = "The service is temporarily unavailable, please try again"
    status_code = 503


class ValidationError(HoneyBeeError):
    """Required form input is missing or malformed; raised before any backend call"""

    default_message = "Please fill in the required fields"
    status_code = 422


class NotFound(HoneyBeeError):
    default_message = "Not found"
    status_code = 404
