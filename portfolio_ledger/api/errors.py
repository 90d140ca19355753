"""Exception-to-response mapping for the HTTP surface."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from portfolio_ledger.adapters import PriceNotAvailableError, PriceProviderError
from portfolio_ledger.db import ConcurrentModificationError
from portfolio_ledger.domain import (
    AccountNotFoundError,
    ConflictQuantityError,
    DomainError,
    DuplicateEntityError,
    HoldingNotFoundError,
)

from .serialization import api_error_payload

logger = logging.getLogger(__name__)

_DOMAIN_ERROR_STATUS_CODES: tuple[tuple[type[DomainError], int], ...] = (
    (AccountNotFoundError, status.HTTP_404_NOT_FOUND),
    (HoldingNotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictQuantityError, status.HTTP_409_CONFLICT),
    (DuplicateEntityError, status.HTTP_409_CONFLICT),
)


def api_status_code_for_domain_error(error: DomainError) -> int:
    """Resolve the HTTP status for one domain error.

    Args:
        error: Raised domain error.

    Returns:
        int: Mapped status code, 400 for validation and funds failures.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    for error_type, status_code in _DOMAIN_ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def api_register_exception_handlers(application: FastAPI) -> None:
    """Attach handlers turning typed failures into error payloads.

    Args:
        application: FastAPI application.

    Returns:
        None: Handlers are registered as side effect.

    Raises:
        ValueError: Raised when application is None.
    """

    if application is None:
        raise ValueError("application must not be None")

    @application.exception_handler(DomainError)
    async def api_handle_domain_error(_request: Request, error: DomainError) -> JSONResponse:
        return JSONResponse(
            content=api_error_payload(code=error.error_code, message=str(error)),
            status_code=api_status_code_for_domain_error(error),
        )

    @application.exception_handler(ConcurrentModificationError)
    async def api_handle_concurrent_modification(_request: Request, error: ConcurrentModificationError) -> JSONResponse:
        logger.warning("write rejected after retries: %s", error)
        return JSONResponse(
            content=api_error_payload(code=error.error_code, message=str(error)),
            status_code=status.HTTP_409_CONFLICT,
        )

    @application.exception_handler(PriceProviderError)
    async def api_handle_price_provider_error(_request: Request, error: PriceProviderError) -> JSONResponse:
        if isinstance(error, PriceNotAvailableError):
            status_code = status.HTTP_404_NOT_FOUND
        else:
            logger.error("price provider failure: %s", error)
            status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return JSONResponse(
            content=api_error_payload(code=error.error_code, message=str(error)),
            status_code=status_code,
        )

    @application.exception_handler(RequestValidationError)
    async def api_handle_request_validation_error(_request: Request, error: RequestValidationError) -> JSONResponse:
        payload = api_error_payload(code="INVALID_REQUEST", message="request validation failed")
        payload["errors"] = [
            {"location": ".".join(str(part) for part in detail.get("loc", ())), "message": detail.get("msg", "")}
            for detail in error.errors()
        ]
        return JSONResponse(content=payload, status_code=422)


__all__ = ["api_register_exception_handlers", "api_status_code_for_domain_error"]
