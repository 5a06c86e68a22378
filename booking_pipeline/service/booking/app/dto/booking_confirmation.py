from decimal import Decimal

import attrs

from booking_pipeline.service.shared_kernel.domain.domain_event import BookingPlacedEvent


@attrs.define(frozen=True)
class BookingConfirmation:
    """
    Acceptance of a booking at admission time.

    Not a guarantee of fulfillment: the order is created asynchronously and
    may end in reconciliation if capacity was oversold.
    """

    booking_id: str
    customer_id: int
    event_id: int
    ticket_count: int
    total_price: Decimal

    @classmethod
    def from_event(cls, event: BookingPlacedEvent) -> 'BookingConfirmation':
        return cls(
            booking_id=event.booking_id,
            customer_id=event.customer_id,
            event_id=event.event_id,
            ticket_count=event.ticket_count,
            total_price=event.total_price,
        )
