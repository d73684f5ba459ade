"""Error taxonomy shared by every LMS operation.

Core operations either return a value or raise exactly one of the
``LMSError`` subclasses below. The HTTP layer maps ``status_code`` to the
response (see ``libs.common.error_handler``); nothing here knows about
FastAPI.
"""

from typing import Any, Optional


class LMSError(Exception):
    """Base class for classified failures."""

    kind: str = "internal"
    status_code: int = 500

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"detail": self.message, "kind": self.kind}
        if self.context:
            body["context"] = self.context
        return body


class InvalidInputError(LMSError):
    """Missing or malformed required field."""

    kind = "invalid_input"
    status_code = 400


class NotFoundError(LMSError):
    """Referenced entity does not exist."""

    kind = "not_found"
    status_code = 404


class ConflictError(LMSError):
    """Uniqueness violation (email, enrollment, attachment)."""

    kind = "conflict"
    status_code = 409


class UnauthorizedError(LMSError):
    """Role or ownership check failed."""

    kind = "unauthorized"
    status_code = 403


class AuthenticationError(UnauthorizedError):
    """Credentials did not match an account."""

    status_code = 401


class InvalidStateError(LMSError):
    """Stored data is in a state the operation cannot handle (e.g. unknown role)."""

    kind = "invalid_state"
    status_code = 400


class InternalError(LMSError):
    """Store or collaborator failure not classified above."""

    kind = "internal"
    status_code = 500


def require_fields(**fields: Any) -> None:
    """Raise ``InvalidInputError`` naming every blank required field.

    >>> require_fields(title="CPR", description="")
    Traceback (most recent call last):
    ...
    libs.common.errors.InvalidInputError: description is required
    """
    missing = [
        name
        for name, value in fields.items()
        if value is None or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        verb = "is" if len(missing) == 1 else "are"
        raise InvalidInputError(
            f"{' and '.join(missing)} {verb} required",
            context={"missing": missing},
        )
