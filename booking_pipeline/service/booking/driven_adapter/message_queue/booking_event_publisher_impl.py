"""
Booking Event Publisher Implementation

Kafka adapter for IBookingEventPublisher. Records are keyed by event_id so
every booking of one event shares a partition and is consumed in admission order.
"""

from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.platform.message_queue.event_publisher import publish_domain_event
from booking_pipeline.platform.message_queue.kafka_constant_builder import (
    KafkaMessageKeyBuilder,
    KafkaTopicBuilder,
)
from booking_pipeline.service.booking.app.interface.i_booking_event_publisher import (
    IBookingEventPublisher,
)
from booking_pipeline.service.shared_kernel.domain.domain_event import BookingPlacedEvent


class BookingEventPublisherImpl(IBookingEventPublisher):
    @Logger.io
    async def publish_booking_placed(self, *, event: BookingPlacedEvent) -> None:
        await publish_domain_event(
            event=event,
            topic=KafkaTopicBuilder.booking_placed(),
            key=KafkaMessageKeyBuilder.booking_placed(event_id=event.event_id),
        )
