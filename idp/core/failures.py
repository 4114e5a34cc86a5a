"""Tagged failure variants and the exception-to-failure boundary.

Every error raised while handling a request is converted exactly once into
one of the variants below. Encoders dispatch on ``Failure.kind`` and read
only the fields that variant carries.
"""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any
from typing import ClassVar

from fastapi import status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from idp.core.error_codes import INVALID_AUTH_TOKEN
from idp.core.error_codes import INVALID_CLIENT_ID
from idp.core.exceptions import IdPError
from idp.core.exceptions import InvalidClientError
from idp.core.exceptions import MissingParameterError
from idp.core.exceptions import NotAuthenticatedError
from idp.core.exceptions import UnacceptableMediaTypeError

PARAMETER_LOCATIONS = frozenset({"query", "header", "cookie"})
LOCATION_PREFIXES = frozenset({"body", "query", "path", "header", "cookie"})

# Message FastAPI's security dependencies use when credentials are absent.
NOT_AUTHENTICATED_DETAIL = "Not authenticated"


class FailureKind(str, Enum):
    VALIDATION = "validation"
    CONSTRAINT_VIOLATION = "constraint_violation"
    MISSING_PARAMETER = "missing_parameter"
    UNACCEPTABLE_MEDIA_TYPE = "unacceptable_media_type"
    UNAUTHENTICATED_CLIENT = "unauthenticated_client"
    DOMAIN = "domain"
    NOT_AUTHENTICATED = "not_authenticated"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class FieldError:
    """Single field-level issue of a request body."""

    field: str
    message: str


@dataclass(frozen=True)
class Violation:
    """Single constraint violation on a request parameter or model."""

    property_path: str
    message: str


@dataclass(frozen=True)
class ValidationFailure:
    kind: ClassVar[FailureKind] = FailureKind.VALIDATION

    field_errors: tuple[FieldError, ...]
    message: str
    cause: BaseException | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ConstraintViolationFailure:
    """Parameter or model constraint failures.

    ``violations`` has set semantics: callers must not rely on its order.
    """

    kind: ClassVar[FailureKind] = FailureKind.CONSTRAINT_VIOLATION

    violations: tuple[Violation, ...]
    message: str
    cause: BaseException | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class MissingParameterFailure:
    kind: ClassVar[FailureKind] = FailureKind.MISSING_PARAMETER

    message: str
    cause: BaseException | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class UnacceptableMediaTypeFailure:
    kind: ClassVar[FailureKind] = FailureKind.UNACCEPTABLE_MEDIA_TYPE

    message: str
    cause: BaseException | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class UnauthenticatedClientFailure:
    kind: ClassVar[FailureKind] = FailureKind.UNAUTHENTICATED_CLIENT

    error_code: str = INVALID_CLIENT_ID
    cause: BaseException | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class DomainFailure:
    kind: ClassVar[FailureKind] = FailureKind.DOMAIN

    error_code: str
    cause: BaseException | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class NotAuthenticatedFailure:
    kind: ClassVar[FailureKind] = FailureKind.NOT_AUTHENTICATED

    error_code: str = INVALID_AUTH_TOKEN
    cause: BaseException | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class UnclassifiedFailure:
    """Anything not recognised. ``message`` is for logs only."""

    kind: ClassVar[FailureKind] = FailureKind.UNCLASSIFIED

    message: str = ""
    cause: BaseException | None = field(default=None, compare=False, repr=False)


Failure = (
    ValidationFailure
    | ConstraintViolationFailure
    | MissingParameterFailure
    | UnacceptableMediaTypeFailure
    | UnauthenticatedClientFailure
    | DomainFailure
    | NotAuthenticatedFailure
    | UnclassifiedFailure
)

# Variants that carry their own error code and are reported as domain failures
# wherever a surface has no dedicated mapping for them.
CODED_KINDS = frozenset(
    {
        FailureKind.UNAUTHENTICATED_CLIENT,
        FailureKind.DOMAIN,
        FailureKind.NOT_AUTHENTICATED,
    }
)


def _format_location(location: tuple[Any, ...] | list[Any] | Any) -> str:
    if not isinstance(location, (tuple, list)):
        return str(location)

    filtered = [str(part) for part in location if part not in LOCATION_PREFIXES]
    if filtered:
        return ".".join(filtered)

    if not location:
        return "request"

    return str(location[0])


def _issue_message(issue: Mapping[str, Any]) -> str:
    message = str(issue.get("msg", "Invalid value"))
    if issue.get("type") == "value_error":
        # Validators raise error codes as ValueError text; report them verbatim.
        ctx = issue.get("ctx") or {}
        error = ctx.get("error")
        if error is not None:
            return str(error)
        return message.removeprefix("Value error, ")
    return message


def _location_kind(issue: Mapping[str, Any]) -> str | None:
    location = issue.get("loc", ())
    if isinstance(location, (tuple, list)) and location:
        return str(location[0])
    return None


def _violations(issues: Iterable[Mapping[str, Any]]) -> tuple[Violation, ...]:
    return tuple(
        Violation(property_path=_format_location(issue.get("loc", ())), message=_issue_message(issue))
        for issue in issues
    )


def _from_request_validation(exc: RequestValidationError) -> Failure:
    issues = list(exc.errors())
    if not issues:
        return ValidationFailure(field_errors=(), message="Request validation failed", cause=exc)

    if any(_location_kind(issue) == "body" for issue in issues):
        field_errors = tuple(
            FieldError(field=_format_location(issue.get("loc", ())), message=_issue_message(issue))
            for issue in issues
        )
        return ValidationFailure(field_errors=field_errors, message="Request validation failed", cause=exc)

    if all(issue.get("type") == "missing" and _location_kind(issue) in PARAMETER_LOCATIONS for issue in issues):
        name = _format_location(issues[0].get("loc", ()))
        return MissingParameterFailure(message=f"{name} is required", cause=exc)

    return ConstraintViolationFailure(
        violations=_violations(issues),
        message="Request parameter validation failed",
        cause=exc,
    )


def is_routing_error(exc: StarletteHTTPException, scope: Mapping[str, Any]) -> bool:
    """Return whether the router itself rejected the request.

    A 404 only counts when no endpoint matched; an endpoint raising 404 is an
    ordinary failure.
    """
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return True
    return exc.status_code == status.HTTP_404_NOT_FOUND and "endpoint" not in scope


def _is_not_authenticated(exc: StarletteHTTPException) -> bool:
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        return True
    return exc.status_code == status.HTTP_403_FORBIDDEN and exc.detail == NOT_AUTHENTICATED_DETAIL


def _from_http_exception(exc: StarletteHTTPException) -> Failure:
    if exc.status_code in (status.HTTP_406_NOT_ACCEPTABLE, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE):
        message = str(exc.detail) if isinstance(exc.detail, str) and exc.detail else "Unacceptable media type"
        return UnacceptableMediaTypeFailure(message=message, cause=exc)
    if _is_not_authenticated(exc):
        return NotAuthenticatedFailure(cause=exc)
    return UnclassifiedFailure(message=str(exc.detail), cause=exc)


def failure_from_exception(exc: BaseException) -> Failure:
    """Convert a raised exception into its failure variant."""
    if isinstance(exc, RequestValidationError):
        return _from_request_validation(exc)
    if isinstance(exc, ValidationError):
        return ConstraintViolationFailure(violations=_violations(exc.errors()), message=str(exc), cause=exc)
    if isinstance(exc, MissingParameterError):
        return MissingParameterFailure(message=exc.message, cause=exc)
    if isinstance(exc, UnacceptableMediaTypeError):
        return UnacceptableMediaTypeFailure(message=exc.message, cause=exc)
    if isinstance(exc, StarletteHTTPException):
        return _from_http_exception(exc)
    if isinstance(exc, InvalidClientError):
        return UnauthenticatedClientFailure(error_code=exc.error_code, cause=exc)
    if isinstance(exc, NotAuthenticatedError):
        return NotAuthenticatedFailure(error_code=exc.error_code, cause=exc)
    if isinstance(exc, IdPError):
        return DomainFailure(error_code=exc.error_code, cause=exc)
    return UnclassifiedFailure(message=str(exc), cause=exc)
