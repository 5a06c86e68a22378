"""
Inventory Service - Main Application
Owns per-event capacity: synchronous read and the serialized decrement.

Usage:
    SERVICE_NAME=inventory-service uvicorn booking_pipeline.service.inventory.main:app --port 8001
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from booking_pipeline.platform.app_factory import create_app
from booking_pipeline.platform.config.di import container
from booking_pipeline.platform.database.orm_db_setting import (
    create_db_and_tables,
    dispose_engine,
    get_engine,
)
from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.platform.message_queue.kafka_constant_builder import ServiceNames
from booking_pipeline.platform.observability.tracing import TracingConfig
from booking_pipeline.service.inventory.app.command import decrement_inventory_use_case
from booking_pipeline.service.inventory.app.query import (
    get_event_inventory_use_case,
    get_venue_use_case,
    list_event_inventories_use_case,
)
from booking_pipeline.service.inventory.driving_adapter.http_controller.inventory_controller import (
    router as inventory_router,
)


WIRE_MODULES = [
    decrement_inventory_use_case,
    get_event_inventory_use_case,
    get_venue_use_case,
    list_event_inventories_use_case,
]


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifespan: startup and shutdown"""
    Logger.base.info('🚀 [Inventory Service] Starting up...')

    tracing = TracingConfig(service_name=ServiceNames.INVENTORY_SERVICE)
    tracing.setup()
    tracing.instrument_sqlalchemy(engine=get_engine())
    Logger.base.info('📊 [Inventory Service] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Inventory Service] Dependency injection wired')

    await create_db_and_tables()
    Logger.base.info('🗄️ [Inventory Service] Database tables ensured')

    Logger.base.info('✅ [Inventory Service] Startup complete')

    yield

    Logger.base.info('🛑 [Inventory Service] Shutting down...')

    await dispose_engine()
    tracing.shutdown()
    container.unwire()

    Logger.base.info('👋 [Inventory Service] Shutdown complete')


app = create_app(
    lifespan=lifespan,
    routers=[(inventory_router, '/api/inventory', 'inventory')],
    service_name=ServiceNames.INVENTORY_SERVICE,
    description='Owns per-event capacity: read and serialized decrement',
)
