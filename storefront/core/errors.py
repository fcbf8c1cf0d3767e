"""
Error taxonomy for the storefront API.

Rule: every failure is reduced to a `ClassifiedError` tagged with an
`ErrorKind` before anything reports or renders it. Operational kinds carry a
fixed (status, code) pair; anything that is not an `AppError` is a DEFECT and
is only ever described to clients as a generic 500.
"""
from __future__ import annotations

import enum
import traceback
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from pydantic_core import to_jsonable_python
from starlette import status


# ---------------------------------------------------------------------------
# Kinds
# ---------------------------------------------------------------------------

class ErrorKind(str, enum.Enum):
    VALIDATION = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    RATE_LIMIT = "RATE_LIMIT_EXCEEDED"
    # AppError built directly: status and code come from the instance.
    APPLICATION = "APPLICATION"
    DEFECT = "DEFECT"

    @property
    def status_code(self) -> Optional[int]:
        return _KIND_STATUS.get(self)

    @property
    def code(self) -> Optional[str]:
        if self in _KIND_STATUS:
            return self.value
        return None


_KIND_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.RATE_LIMIT: status.HTTP_429_TOO_MANY_REQUESTS,
}

DEFAULT_CODE = "INTERNAL_ERROR"


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class AppError(Exception):
    """Base class for all application-level errors."""
    kind: ErrorKind = ErrorKind.APPLICATION

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        code: str = DEFAULT_CODE,
        is_operational: bool = True,
        context: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self._status_code = status_code
        self._code = code
        self._is_operational = is_operational
        self.context: dict[str, Any] = dict(context) if context else {}

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def code(self) -> str:
        return self._code

    @property
    def is_operational(self) -> bool:
        return self._is_operational


class _OperationalError(AppError):
    """An AppError whose status and code are fixed by its kind."""

    def __init__(self, message: str, context: Optional[Mapping[str, Any]] = None):
        super().__init__(
            message,
            status_code=self.kind.status_code,
            code=self.kind.code,
            is_operational=True,
            context=context,
        )


class ValidationError(_OperationalError):
    kind = ErrorKind.VALIDATION


class NotFoundError(_OperationalError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")


class UnauthorizedError(_OperationalError):
    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized access"):
        super().__init__(message)


class ForbiddenError(_OperationalError):
    kind = ErrorKind.FORBIDDEN

    def __init__(self, message: str = "Forbidden access"):
        super().__init__(message)


class ConflictError(_OperationalError):
    kind = ErrorKind.CONFLICT


class RateLimitError(_OperationalError):
    kind = ErrorKind.RATE_LIMIT

    def __init__(self, message: str = "Rate limit exceeded"):
        super().__init__(message)


# Starlette HTTPException statuses that have a matching variant.
HTTP_STATUS_VARIANTS: dict[int, type[AppError]] = {
    status.HTTP_401_UNAUTHORIZED: UnauthorizedError,
    status.HTTP_403_FORBIDDEN: ForbiddenError,
    status.HTTP_409_CONFLICT: ConflictError,
    status.HTTP_429_TOO_MANY_REQUESTS: RateLimitError,
}


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ClassifiedError:
    kind: ErrorKind
    status_code: int
    code: str
    message: str
    is_operational: bool
    stack: str
    context: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_defect(self) -> bool:
        return self.kind is ErrorKind.DEFECT


def _safe_str(error: BaseException) -> str:
    try:
        return str(error)
    except Exception:
        return f"<unprintable {type(error).__name__}>"


def format_stack(error: BaseException) -> str:
    """Traceback text for `error`; just the summary line if it was never raised."""
    try:
        return "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        ).rstrip()
    except Exception:
        return f"{type(error).__name__}: {_safe_str(error)}"


def jsonable_context(context: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of `context` that json.dumps accepts; unknown types become strings."""
    try:
        return to_jsonable_python(dict(context), serialize_unknown=True)
    except Exception:
        return {str(key): repr(value) for key, value in context.items()}


def classify(error: BaseException) -> ClassifiedError:
    if isinstance(error, AppError):
        return ClassifiedError(
            kind=error.kind,
            status_code=error.status_code,
            code=error.code,
            message=error.message,
            is_operational=error.is_operational,
            stack=format_stack(error),
            context=dict(error.context),
        )
    return ClassifiedError(
        kind=ErrorKind.DEFECT,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code=DEFAULT_CODE,
        message=_safe_str(error),
        is_operational=False,
        stack=format_stack(error),
    )
