"""Central error dispatcher and exception handler registration.

Every failure raised while a request is processed ends up in
``ErrorDispatcher.dispatch``, which picks the response contract of the API
surface the request belongs to:

* internal management APIs answer 200 with an ``errors`` envelope,
* the OAuth APIs answer 400/500 with a single ``error``/``error_description``,
* the UserInfo endpoint answers an empty 401 with a ``WWW-Authenticate``
  challenge.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi import Response
from fastapi import status
from fastapi.exception_handlers import http_exception_handler as default_http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from idp.core.error_codes import INVALID_AUTH_TOKEN
from idp.core.error_codes import INVALID_CLIENT_ID
from idp.core.error_codes import INVALID_INPUT
from idp.core.error_codes import INVALID_REQUEST
from idp.core.error_codes import UNKNOWN_ERROR
from idp.core.error_codes import is_registered
from idp.core.exceptions import IdPError
from idp.core.exceptions import MissingParameterError
from idp.core.exceptions import UnacceptableMediaTypeError
from idp.core.failures import CODED_KINDS
from idp.core.failures import Failure
from idp.core.failures import FailureKind
from idp.core.failures import failure_from_exception
from idp.core.failures import is_routing_error
from idp.core.messages import MessageResolver
from idp.core.surfaces import DEFAULT_SURFACE
from idp.core.surfaces import SURFACE_RULES
from idp.core.surfaces import Surface
from idp.core.surfaces import classify_path
from idp.core.surfaces import request_path
from idp.schemas.error import ErrorEntry
from idp.schemas.error import OAuthError
from idp.schemas.error import ResponseWrapper

logger = logging.getLogger(__name__)

WWW_AUTHENTICATE = "WWW-Authenticate"


class ErrorDispatcher:
    """Translate failures into the response contract of the calling surface."""

    def __init__(
        self,
        resolver: MessageResolver,
        *,
        rules: Sequence[tuple[str, Surface]] = SURFACE_RULES,
        default: Surface = DEFAULT_SURFACE,
    ) -> None:
        self._resolver = resolver
        self._rules = tuple(rules)
        self._default = default

    def classify(self, path: str) -> Surface:
        return classify_path(path, self._rules, self._default)

    def dispatch(self, failure: Failure, path: str) -> Response:
        """Log ``failure`` once and render it for the surface owning ``path``."""
        logger.error(
            "Unhandled %s failure while processing %s",
            failure.kind.value,
            path,
            exc_info=failure.cause,
        )
        if failure.kind in CODED_KINDS and not is_registered(failure.error_code):
            logger.warning("Failure carries unregistered error code %s", failure.error_code)

        surface = self.classify(path)
        if surface is Surface.HEADER_CHALLENGE:
            return self.challenge_response(failure)
        if surface is Surface.OAUTH:
            return self.oauth_response(failure)
        return self.internal_response(failure)

    def _entry(self, code: str) -> ErrorEntry:
        return ErrorEntry(error_code=code, error_message=self._resolver.lookup(code))

    def encode_internal(self, failure: Failure) -> ResponseWrapper:
        """Build the internal-API envelope; always holds at least one entry."""
        entries: list[ErrorEntry] = []

        if failure.kind is FailureKind.VALIDATION:
            entries = [
                ErrorEntry(error_code=item.message, error_message=f"{item.field}: {item.message}")
                for item in failure.field_errors
            ]
        elif failure.kind is FailureKind.CONSTRAINT_VIOLATION:
            entries = [
                ErrorEntry(error_code=INVALID_REQUEST, error_message=f"{item.property_path}: {item.message}")
                for item in failure.violations
            ]
        elif failure.kind in (FailureKind.MISSING_PARAMETER, FailureKind.UNACCEPTABLE_MEDIA_TYPE):
            entries = [ErrorEntry(error_code=INVALID_REQUEST, error_message=failure.message)]
        elif failure.kind is FailureKind.UNAUTHENTICATED_CLIENT:
            entries = [self._entry(INVALID_CLIENT_ID)]
        elif failure.kind in CODED_KINDS:
            entries = [self._entry(failure.error_code)]

        if not entries:
            entries = [self._entry(UNKNOWN_ERROR)]
        return ResponseWrapper(errors=entries)

    def encode_oauth(self, failure: Failure) -> tuple[OAuthError, int]:
        """Build the single OAuth error and its HTTP status."""
        if failure.kind is FailureKind.VALIDATION:
            message = failure.field_errors[0].message if failure.field_errors else failure.message
            return OAuthError(error=INVALID_INPUT, error_description=message), status.HTTP_400_BAD_REQUEST

        if failure.kind is FailureKind.CONSTRAINT_VIOLATION:
            message = failure.violations[0].message if failure.violations else failure.message
            return OAuthError(error=INVALID_INPUT, error_description=message), status.HTTP_400_BAD_REQUEST

        if failure.kind in CODED_KINDS:
            code = failure.error_code
            return (
                OAuthError(error=code, error_description=self._resolver.lookup(code)),
                status.HTTP_400_BAD_REQUEST,
            )

        return (
            OAuthError(error=UNKNOWN_ERROR, error_description=self._resolver.lookup(UNKNOWN_ERROR)),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @staticmethod
    def challenge_error(failure: Failure) -> str:
        """Return the bearer challenge error token for ``failure``."""
        if failure.kind is FailureKind.NOT_AUTHENTICATED:
            return INVALID_AUTH_TOKEN
        return UNKNOWN_ERROR

    def internal_response(self, failure: Failure) -> JSONResponse:
        payload = self.encode_internal(failure)
        return JSONResponse(status_code=status.HTTP_200_OK, content=payload.model_dump(by_alias=True))

    def oauth_response(self, failure: Failure) -> JSONResponse:
        payload, status_code = self.encode_oauth(failure)
        return JSONResponse(status_code=status_code, content=payload.model_dump())

    def challenge_response(self, failure: Failure) -> Response:
        return Response(
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={WWW_AUTHENTICATE: f'error="{self.challenge_error(failure)}"'},
        )


def register_error_handlers(app: FastAPI, dispatcher: ErrorDispatcher) -> None:
    """Route every unhandled request failure on ``app`` through ``dispatcher``."""

    async def dispatch_exception(request: Request, exc: Exception) -> Response:
        return dispatcher.dispatch(failure_from_exception(exc), request_path(request))

    async def dispatch_http_exception(request: Request, exc: StarletteHTTPException) -> Response:
        # Requests no endpoint accepted keep the framework's 404/405 rendering.
        if is_routing_error(exc, request.scope):
            return await default_http_exception_handler(request, exc)
        return await dispatch_exception(request, exc)

    app.add_exception_handler(RequestValidationError, dispatch_exception)
    app.add_exception_handler(ValidationError, dispatch_exception)
    app.add_exception_handler(MissingParameterError, dispatch_exception)
    app.add_exception_handler(UnacceptableMediaTypeError, dispatch_exception)
    app.add_exception_handler(IdPError, dispatch_exception)
    app.add_exception_handler(StarletteHTTPException, dispatch_http_exception)
    app.add_exception_handler(Exception, dispatch_exception)
