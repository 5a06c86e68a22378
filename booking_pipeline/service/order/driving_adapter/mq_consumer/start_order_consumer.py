"""
Standalone Order Consumer Entry Point

Usage:
    SERVICE_NAME=order-service python -m booking_pipeline.service.order.driving_adapter.mq_consumer.start_order_consumer

The Kafka poll loop is synchronous and runs in a worker thread; async use cases
are called back on the event loop through an anyio BlockingPortal.
"""

import signal

import anyio
from anyio.from_thread import BlockingPortal
import anyio.to_thread

from booking_pipeline.platform.config.di import container
from booking_pipeline.platform.database.orm_db_setting import create_db_and_tables, dispose_engine
from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.platform.message_queue.kafka_constant_builder import ServiceNames
from booking_pipeline.platform.message_queue.kafka_topic_initializer import KafkaTopicInitializer
from booking_pipeline.platform.observability.tracing import TracingConfig
from booking_pipeline.service.order.driving_adapter.mq_consumer.order_mq_consumer import (
    OrderMqConsumer,
)


async def run_consumer(consumer: OrderMqConsumer) -> None:
    """Run the sync poll loop in a thread, bridged back to this event loop."""
    async with BlockingPortal() as portal:
        consumer.set_portal(portal)
        await anyio.to_thread.run_sync(consumer.start)


async def main() -> None:
    Logger.base.info('🚀 [Order Consumer] Starting...')

    tracing = TracingConfig(service_name=ServiceNames.ORDER_SERVICE)
    tracing.setup()

    await create_db_and_tables()

    # Auto-create topics before consumer starts
    KafkaTopicInitializer().ensure_topics_exist()

    consumer = OrderMqConsumer()

    try:
        with anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM) as signals:

            async def signal_watcher() -> None:
                async for signum in signals:
                    Logger.base.info(f'🛑 [Order Consumer] Received signal {signum}')
                    consumer.stop()
                    break

            async with anyio.create_task_group() as tg:
                tg.start_soon(signal_watcher)

                await run_consumer(consumer)
                tg.cancel_scope.cancel()

    finally:
        await container.inventory_client().close()
        await dispose_engine()
        tracing.shutdown()
        Logger.base.info('👋 [Order Consumer] Shutdown complete')


if __name__ == '__main__':
    anyio.run(main)
