"""
Booking Service - Main Application
Admission check and publication of Booking Records.

Usage:
    SERVICE_NAME=booking-service uvicorn booking_pipeline.service.booking.main:app --port 8000
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
from booking_pipeline.platform.message_queue.event_publisher import close_producer
from booking_pipeline.platform.message_queue.kafka_constant_builder import ServiceNames
from booking_pipeline.platform.message_queue.kafka_topic_initializer import KafkaTopicInitializer
from booking_pipeline.platform.observability.tracing import TracingConfig
from booking_pipeline.service.booking.app.command import submit_booking_use_case
from booking_pipeline.service.booking.driving_adapter.http_controller.booking_controller import (
    router as booking_router,
)


WIRE_MODULES = [submit_booking_use_case]


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifespan: startup and shutdown"""
    Logger.base.info('🚀 [Booking Service] Starting up...')

    tracing = TracingConfig(service_name=ServiceNames.BOOKING_SERVICE)
    tracing.setup()
    tracing.instrument_sqlalchemy(engine=get_engine())
    Logger.base.info('📊 [Booking Service] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Booking Service] Dependency injection wired')

    await create_db_and_tables()

    # Topic must exist before the first publish
    KafkaTopicInitializer().ensure_topics_exist()

    Logger.base.info('✅ [Booking Service] Startup complete')

    yield

    Logger.base.info('🛑 [Booking Service] Shutting down...')

    try:
        await close_producer()
        Logger.base.info('📤 [Booking Service] Kafka producer closed')
    except Exception as e:
        Logger.base.warning(f'⚠️ [Booking Service] Error closing producer: {e}')

    await container.inventory_client().close()
    await dispose_engine()
    tracing.shutdown()
    container.unwire()

    Logger.base.info('👋 [Booking Service] Shutdown complete')


app = create_app(
    lifespan=lifespan,
    routers=[(booking_router, '/api/booking', 'booking')],
    service_name=ServiceNames.BOOKING_SERVICE,
    description='Admission check and Booking Record publication',
)
