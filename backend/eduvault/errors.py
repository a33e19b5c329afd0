from __future__ import annotations


class EduVaultError(Exception):
    """Base for errors that map onto an HTTP status and a client-facing message."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(EduVaultError):
    status_code = 400
    default_message = "Invalid request"


class PermissionDenied(EduVaultError):
    status_code = 403
    default_message = "Access denied"


class NotFound(EduVaultError):
    status_code = 404
    default_message = "Not found"


class Conflict(EduVaultError):
    status_code = 409
    default_message = "Already exists"


class ExecutionError(EduVaultError):
    """Upstream execution service failed or cannot run the request.

    The message is kept for logs; clients only ever see the generic text.
    """

    status_code = 500
    default_message = "Code execution failed"


class UnsupportedLanguage(ExecutionError):
    pass


class ExecutionTimeout(ExecutionError):
    pass
