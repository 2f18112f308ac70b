"""Error taxonomy shared by the account workflows and the HTTP layer.

Every workflow failure is one of these. The HTTP layer turns them into
``{"kind": ..., "message": ...}`` with the class's status code.
"""


class AccountError(Exception):
    """Base class for workflow failures reported to the caller."""

    kind = "error"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class ValidationError(AccountError):
    """A required field is missing or malformed."""

    kind = "validation"
    http_status = 400


class NotFoundError(AccountError):
    """No account exists for the identity."""

    kind = "not_found"
    http_status = 404


class ConflictError(AccountError):
    """An account already exists for the identity."""

    kind = "conflict"
    http_status = 400


class CredentialError(AccountError):
    """OTP invalid or expired, or password mismatch."""

    kind = "credential"
    http_status = 400


class DependencyError(AccountError):
    """Storage or email transport failed. The message stays generic."""

    kind = "dependency"
    http_status = 500
