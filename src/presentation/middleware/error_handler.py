"""Error handling middleware and exception handlers."""

from typing import Callable, Dict, Type

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from src.domain.exceptions import (
    ConcurrentModificationException,
    DomainException,
    IdempotencyKeyReusedException,
    InsufficientFundsException,
    NetworkError,
    NoPendingPaymentsException,
    OrderAlreadyCompletedException,
    OrderNotFoundException,
    PaymentInProgressException,
    PlanNotFoundException,
    RescheduleLimitExceededException,
    RescheduleNotAllowedException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


STATUS_BY_EXCEPTION: Dict[Type[DomainException], int] = {
    OrderNotFoundException: 404,
    PlanNotFoundException: 404,
    InsufficientFundsException: 402,
    OrderAlreadyCompletedException: 409,
    NoPendingPaymentsException: 409,
    RescheduleLimitExceededException: 409,
    RescheduleNotAllowedException: 409,
    PaymentInProgressException: 409,
    IdempotencyKeyReusedException: 409,
    ConcurrentModificationException: 409,
}


def _error_body(exc: DomainException) -> dict:
    return {
        "error": exc.code,
        "message": exc.message,
        "request_id": get_request_id(),
    }


def _status_handler(status_code: int) -> Callable:
    async def handler(request: Request, exc: DomainException) -> JSONResponse:
        logger.info(
            "domain_error",
            request_id=get_request_id(),
            path=request.url.path,
            code=exc.code,
            status_code=status_code,
        )
        return JSONResponse(status_code=status_code, content=_error_body(exc))

    return handler


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses. Anything not
    listed in STATUS_BY_EXCEPTION is a validation-style error (400).
    """
    for exc_type, status_code in STATUS_BY_EXCEPTION.items():
        app.add_exception_handler(exc_type, _status_handler(status_code))

    @app.exception_handler(NetworkError)
    async def network_error_handler(
        request: Request,
        exc: NetworkError,
    ) -> JSONResponse:
        """Handle upstream transport failures."""
        logger.error(
            "network_error",
            request_id=get_request_id(),
            message=exc.message,
            status_code=exc.status_code,
        )
        return JSONResponse(
            status_code=503,
            content={
                "error": exc.code,
                "message": "Service temporarily unavailable. Please try again.",
                "request_id": get_request_id(),
            },
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle validation and other client errors."""
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return JSONResponse(status_code=400, content=_error_body(exc))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred.",
                "request_id": get_request_id(),
            },
        )
