"""
Domain error taxonomy.

Services raise these; app.main maps each one to an HTTP status and a JSON
body of the form {"kind": ..., "detail": ...}. The kind strings are stable
and meant for machines; detail is for humans and never carries storage
error text.
"""

from fastapi import status


class ForumError(Exception):
    """Base class for errors surfaced to API callers."""

    kind: str = "error"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Something went wrong"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind, "detail": self.detail}


class ValidationError(ForumError):
    """A required field is missing or malformed."""

    kind = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"

    def __init__(self, detail: str | None = None, field: str | None = None) -> None:
        super().__init__(detail)
        self.field = field

    def to_dict(self) -> dict[str, str]:
        body = super().to_dict()
        if self.field:
            body["field"] = self.field
        return body


class NotFoundError(ForumError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class AuthorizationError(ForumError):
    """The principal lacks the ownership or role the operation needs."""

    kind = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not authorized"


class ConflictError(ForumError):
    kind = "conflict"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class InternalError(ForumError):
    kind = "internal_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Something went wrong"
