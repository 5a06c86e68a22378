"""
Domain Event Publisher

Event publishing using confluent-kafka's experimental AsyncIO Producer.

Features:
- Global async producer instance for connection reuse
- Idempotent producer with acks=all for reliability
- Awaits the delivery report: publish returns only once the record is durably appended
- Bounded wait (KAFKA_PUBLISH_TIMEOUT_SECONDS); failure surfaces as a 503 to the caller
"""

from typing import Literal

import anyio
from confluent_kafka import KafkaException
from confluent_kafka.experimental.aio import AIOProducer
from opentelemetry import trace

from booking_pipeline.platform.config.core_setting import settings
from booking_pipeline.platform.exception.exceptions import ServiceUnavailableError
from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.platform.message_queue.event_serializer import serialize_domain_event
from booking_pipeline.platform.observability.tracing import inject_trace_context
from booking_pipeline.service.shared_kernel.domain.domain_event.mq_domain_event import MqDomainEvent


# Global async producer instance
_global_producer: AIOProducer | None = None


class EventPublishFailed(ServiceUnavailableError):
    pass


async def _get_global_producer() -> AIOProducer:
    """Get global async producer instance - avoid creating new producer on every publish"""
    global _global_producer
    if _global_producer is None:
        _global_producer = AIOProducer(
            {
                'bootstrap.servers': settings.KAFKA_BOOTSTRAP_SERVERS,
                # === Reliability Settings ===
                'enable.idempotence': True,
                'acks': 'all',  # Wait for all replicas
                'retries': 3,
                # === Batching ===
                'linger.ms': 5,
                # === Compression ===
                'compression.type': 'snappy',
                # Idempotence keeps per-partition order with up to 5 in flight
                'max.in.flight.requests.per.connection': 5,
            }
        )
    return _global_producer


async def publish_domain_event(
    *,
    event: MqDomainEvent,
    topic: str,
    key: str,
) -> Literal[True]:
    """
    Publish domain event to Kafka topic and wait for the broker acknowledgement.

    Args:
        event: Domain event to publish
        topic: Kafka topic name
        key: Partition key (records sharing a key stay ordered)

    Raises:
        EventPublishFailed: broker did not acknowledge within the publish timeout

    Example:
        await publish_domain_event(
            event=BookingPlacedEvent.create(...),
            topic="booking",
            key="42",
        )
    """
    tracer = trace.get_tracer(__name__)

    with tracer.start_as_current_span(
        'kafka.publish',
        attributes={
            'messaging.system': 'kafka',
            'messaging.destination': topic,
            'messaging.destination_kind': 'topic',
            'messaging.kafka.message_key': key,
            'event.type': event.__class__.__name__,
        },
    ):
        trace_headers = inject_trace_context()
        value_bytes = serialize_domain_event(event, trace_context=trace_headers)

        producer = await _get_global_producer()
        try:
            with anyio.fail_after(settings.KAFKA_PUBLISH_TIMEOUT_SECONDS):
                # produce() yields a Future resolved by the delivery report
                delivery_future = await producer.produce(
                    topic=topic, key=key.encode('utf-8'), value=value_bytes
                )
                delivered = await delivery_future
        except TimeoutError as e:
            raise EventPublishFailed(
                f'Timed out publishing {event.__class__.__name__} to {topic}'
            ) from e
        except KafkaException as e:
            raise EventPublishFailed(
                f'Failed to publish {event.__class__.__name__} to {topic}: {e}'
            ) from e

        Logger.base.info(
            f'Published {event.__class__.__name__} to {topic} '
            f'(key={key}, partition={delivered.partition()}, offset={delivered.offset()})'
        )

        return True


async def close_producer() -> None:
    global _global_producer
    if _global_producer is not None:
        await _global_producer.flush()
        await _global_producer.close()
        _global_producer = None
        Logger.base.info('Closed async producer')
