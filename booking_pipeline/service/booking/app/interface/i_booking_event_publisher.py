"""
Booking Event Publisher Interface

Use cases depend on this port, not on the concrete Kafka producer.
"""

from abc import ABC, abstractmethod

from booking_pipeline.service.shared_kernel.domain.domain_event import BookingPlacedEvent


class IBookingEventPublisher(ABC):
    @abstractmethod
    async def publish_booking_placed(self, *, event: BookingPlacedEvent) -> None:
        """
        Publish a Booking Record keyed by its event_id; returns once durably appended.

        Raises:
            EventPublishFailed: broker did not acknowledge in time
        """
        pass
