from typing import Optional


class APIError(RuntimeError):
    """Raised when the workout API rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationError(APIError):
    """The API answered 401; the stored session has been cleared."""


class NotAuthenticatedError(RuntimeError):
    """An operation needs a logged in session but none is held."""

    def __init__(self, message: str = "Login required") -> None:
        super().__init__(message)
