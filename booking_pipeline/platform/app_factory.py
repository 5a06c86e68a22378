"""
Shared FastAPI App Factory

Every service (booking, inventory, order) builds its app here so tracing,
CORS, exception handlers and /health are identical across the pipeline.
"""

from collections.abc import Callable, Sequence
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from booking_pipeline.platform.config.core_setting import settings
from booking_pipeline.platform.exception.exception_handlers import register_exception_handlers
from booking_pipeline.platform.observability.tracing import TracingConfig


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    routers: Sequence[tuple[APIRouter, str, str]],
    service_name: str,
    description: str,
    title_suffix: str = '',
) -> FastAPI:
    """
    Create a configured FastAPI application.

    Args:
        lifespan: Async context manager for app lifespan (startup/shutdown)
        routers: (router, prefix, tag) triples to mount
        service_name: Service name for tracing and /health
        description: App description
        title_suffix: Optional suffix for app title (e.g., " (Test)")
    """
    app = FastAPI(
        title=f'{settings.PROJECT_NAME} - {service_name}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Auto-instrument FastAPI (must be done before mounting routes)
    tracing_config = TracingConfig(service_name=service_name)
    tracing_config.instrument_fastapi(app=app)

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_exception_handlers(app)

    for router, prefix, tag in routers:
        app.include_router(router, prefix=prefix, tags=[tag])

    _register_common_endpoints(app, service_name=service_name)

    return app


def _register_common_endpoints(app: FastAPI, *, service_name: str) -> None:
    @app.get('/health')
    async def health_check() -> dict[str, str]:
        """Health check endpoint for container orchestration."""
        return {'status': 'healthy', 'service': service_name}
