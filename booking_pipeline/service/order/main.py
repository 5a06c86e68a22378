"""
Order Service - Main Application
Runs the fulfillment consumer alongside the order status endpoints.

Usage:
    SERVICE_NAME=order-service uvicorn booking_pipeline.service.order.main:app --port 8002
"""

from contextlib import asynccontextmanager
import os

import anyio
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
from booking_pipeline.platform.message_queue.kafka_topic_initializer import KafkaTopicInitializer
from booking_pipeline.platform.observability.tracing import TracingConfig
from booking_pipeline.service.order.app.query import (
    get_order_use_case,
    list_reconciliation_orders_use_case,
)
from booking_pipeline.service.order.driving_adapter.http_controller.order_controller import (
    router as order_router,
)
from booking_pipeline.service.order.driving_adapter.mq_consumer.order_mq_consumer import (
    OrderMqConsumer,
)
from booking_pipeline.service.order.driving_adapter.mq_consumer.start_order_consumer import (
    run_consumer,
)


WIRE_MODULES = [get_order_use_case, list_reconciliation_orders_use_case]


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifespan: startup and shutdown"""
    Logger.base.info('🚀 [Order Service] Starting up...')

    tracing = TracingConfig(service_name=ServiceNames.ORDER_SERVICE)
    tracing.setup()
    tracing.instrument_sqlalchemy(engine=get_engine())
    Logger.base.info('📊 [Order Service] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Order Service] Dependency injection wired')

    await create_db_and_tables()

    enable_kafka = os.getenv('ENABLE_KAFKA', 'true').lower() in ('true', '1')
    consumer = OrderMqConsumer()

    async with anyio.create_task_group() as tg:
        if enable_kafka:
            KafkaTopicInitializer().ensure_topics_exist()
            tg.start_soon(run_consumer, consumer)
            Logger.base.info('📨 [Order Service] Fulfillment consumer started')
        else:
            Logger.base.info('⏭️  [Order Service] Kafka disabled (ENABLE_KAFKA=false)')

        Logger.base.info('✅ [Order Service] Startup complete')

        yield

        Logger.base.info('🛑 [Order Service] Shutting down...')
        # Poll thread exits after the record in hand; run_consumer then returns
        consumer.stop()

    await container.inventory_client().close()
    await dispose_engine()
    tracing.shutdown()
    container.unwire()

    Logger.base.info('👋 [Order Service] Shutdown complete')


app = create_app(
    lifespan=lifespan,
    routers=[(order_router, '/api/order', 'order')],
    service_name=ServiceNames.ORDER_SERVICE,
    description='Order fulfillment consumer and order status queries',
)
