"""
Centralized error handlers for FastAPI.

Maps domain-specific errors to HTTP responses.
No stack traces, secrets or internal details are exposed to clients.
All error responses share the ``{"error": ..., "details": ...}`` shape;
routes may add fields to it through ``request.state.error_envelope``.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from seravat.domain.exchange.errors import (
    ConnectivityError,
    CredentialsNotFoundError,
    ExchangeApiError,
    ExchangeDomainError,
    ExchangeTimeoutError,
    FormatError,
    MalformedResponseError,
    SignatureError,
)

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_404 = 404
HTTP_500 = 500


def _error_response(
    request: Request, status_code: int, error: str, details: str | None = None
) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, Any] = {"error": error}
    if details:
        body["details"] = details
    body.update(getattr(request.state, "error_envelope", {}))
    return JSONResponse(status_code=status_code, content=body)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle unparseable or incomplete request bodies."""
        details = _describe_validation_error(exc)
        logger.warning("Rejected request body on %s: %s", request.url.path, details)
        return _error_response(request, HTTP_400, "Invalid request data", details)

    @app.exception_handler(CredentialsNotFoundError)
    async def handle_credentials_not_found(
        request: Request, exc: CredentialsNotFoundError
    ) -> JSONResponse:
        """Handle users without stored credentials."""
        logger.warning("No active credentials for user=%s", exc.user_id)
        return _error_response(
            request,
            HTTP_404,
            "Exchange credentials not found",
            "Connect your exchange account in Settings first",
        )

    @app.exception_handler(FormatError)
    async def handle_format_error(request: Request, exc: FormatError) -> JSONResponse:
        """Handle stored credentials that fail the format check."""
        logger.warning("Credential format error: %s", exc.reason)
        return _error_response(request, HTTP_400, exc.message, exc.reason)

    @app.exception_handler(SignatureError)
    async def handle_signature_error(
        request: Request, exc: SignatureError
    ) -> JSONResponse:
        """Handle secrets unusable as signing keys."""
        logger.error("Signature error: %s", exc.reason)
        return _error_response(
            request,
            HTTP_400,
            "Could not sign the request",
            "Problem with the Secret Key. Check that it is correct.",
        )

    @app.exception_handler(ExchangeApiError)
    async def handle_exchange_api_error(
        request: Request, exc: ExchangeApiError
    ) -> JSONResponse:
        """Handle errors reported by the exchange, with remediation text."""
        classified = exc.classified
        logger.warning(
            "Exchange error code=%s category=%s",
            classified.raw_code,
            classified.category.value,
        )
        return _error_response(request, HTTP_400, classified.title, classified.remediation)

    @app.exception_handler(MalformedResponseError)
    async def handle_malformed_response(
        request: Request, exc: MalformedResponseError
    ) -> JSONResponse:
        """Handle exchange responses without usable account data."""
        logger.error("Malformed exchange response: %s", exc.reason)
        return _error_response(
            request,
            HTTP_400,
            "Balance data not found",
            "The exchange response does not contain valid balance information",
        )

    @app.exception_handler(ExchangeTimeoutError)
    async def handle_timeout(
        request: Request, exc: ExchangeTimeoutError
    ) -> JSONResponse:
        """Handle outbound calls that exceeded their deadline."""
        logger.error("Exchange timeout: %s", exc.message)
        return _error_response(
            request,
            HTTP_500,
            "Exchange request timed out",
            "The exchange took too long to respond. Try again.",
        )

    @app.exception_handler(ConnectivityError)
    async def handle_connectivity(
        request: Request, exc: ConnectivityError
    ) -> JSONResponse:
        """Handle an unreachable exchange."""
        logger.error("Exchange connectivity error: %s", exc.reason)
        return _error_response(
            request,
            HTTP_500,
            "Could not reach the exchange",
            "Network problem while contacting the exchange. Try again shortly.",
        )

    @app.exception_handler(ExchangeDomainError)
    async def handle_exchange_domain(
        request: Request, exc: ExchangeDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled exchange domain errors."""
        logger.error("Unhandled exchange domain error: %s", exc.message)
        return _error_response(request, HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(
            request,
            HTTP_500,
            "Internal server error",
            "Unexpected error. Try again in a few moments.",
        )
