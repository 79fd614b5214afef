"""
Application error taxonomy.

Every error carries an HTTP status code and renders as
``{"error": message}`` through the handlers registered in main.
"""


class MenuCupError(Exception):
    """Base class for all application errors."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message}


class ValidationError(MenuCupError):
    status_code = 400
    default_message = "Invalid request"


class UnauthorizedError(MenuCupError):
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(MenuCupError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(MenuCupError):
    status_code = 404
    default_message = "Not found"


class ConflictError(MenuCupError):
    status_code = 409
    default_message = "Already exists"


class BackendError(MenuCupError):
    """A storage or remote-service call failed."""
    status_code = 500
    default_message = "Backend error"
