from typing import Any, Callable, Coroutine

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from booking_pipeline.platform.config.core_setting import settings
from booking_pipeline.platform.exception.exceptions import (
    CustomBaseError,
    ServiceUnavailableError,
)
from booking_pipeline.platform.logging.loguru_io import Logger

# Type alias for exception handlers (compatible with Starlette's expected signature)
ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]


def _route(request: Request) -> str:
    return f'{request.method} {request.url.path}'


async def custom_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, CustomBaseError) else CustomBaseError(str(exc))
    if error.status_code >= 500:
        Logger.base.error(f'💥 [{_route(request)}] {error.__class__.__name__}: {error.message}')
    return JSONResponse(status_code=error.status_code, content={'detail': error.message})


async def service_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Dependency down or too slow (inventory check, inventory store, broker ack).

    Nothing was accepted, so the caller may resubmit; Retry-After tells it when.
    """
    message = exc.message if isinstance(exc, CustomBaseError) else str(exc)
    Logger.base.warning(f'⏳ [{_route(request)}] {exc.__class__.__name__}: {message}')
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={'detail': message},
        headers={'Retry-After': str(settings.SERVICE_UNAVAILABLE_RETRY_AFTER_SECONDS)},
    )


async def value_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={'detail': str(exc)})


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, RequestValidationError) else RequestValidationError([])
    # errors() may carry the raising ValueError in ctx
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'detail': jsonable_encoder(error.errors())},
    )


async def general_500_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    Logger.base.opt(exception=exc).error(f'💥 [{_route(request)}] Unhandled error')
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'detail': 'Internal server error'},
    )


# Starlette resolves handlers along the exception MRO, nearest class first
EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    ServiceUnavailableError: service_unavailable_handler,
    CustomBaseError: custom_error_handler,
    ValueError: value_error_handler,
    RequestValidationError: validation_error_handler,
    Exception: general_500_exception_handler,  # Catch-all for unhandled exceptions
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
