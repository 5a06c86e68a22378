"""
Booking Placed Event

Published by the booking service once the admission check passes; consumed by
the order service. The record is immutable: total_price is fixed at admission
and never recomputed downstream.
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict

import attrs
import uuid_utils

from booking_pipeline.platform.exception.exceptions import DomainError


CENTS = Decimal('0.01')


def _positive(instance: Any, attribute: 'attrs.Attribute[int]', value: int) -> None:
    if value <= 0:
        raise DomainError(f'{attribute.name} must be positive, got {value}')


@attrs.define(frozen=True)
class BookingPlacedEvent:
    """Booking Record: one per accepted booking, keyed on the bus by event_id"""

    booking_id: str  # UUID7, idempotency key for the whole pipeline
    customer_id: int
    event_id: int
    ticket_count: int = attrs.field(validator=_positive)
    total_price: Decimal
    occurred_at: datetime = attrs.field(factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(
        cls,
        *,
        customer_id: int,
        event_id: int,
        ticket_count: int,
        unit_price: Decimal,
    ) -> 'BookingPlacedEvent':
        return cls(
            booking_id=str(uuid_utils.uuid7()),
            customer_id=customer_id,
            event_id=event_id,
            ticket_count=ticket_count,
            total_price=(unit_price * ticket_count).quantize(CENTS),
        )

    @classmethod
    def from_message(cls, data: Dict[str, Any]) -> 'BookingPlacedEvent':
        """
        Rebuild the record from a consumed payload.

        Raises:
            DomainError: missing or malformed fields (permanent, never retried)
        """
        try:
            occurred_at = datetime.fromisoformat(data['occurred_at'])
            return cls(
                booking_id=str(data['booking_id']),
                customer_id=int(data['customer_id']),
                event_id=int(data['event_id']),
                ticket_count=int(data['ticket_count']),
                total_price=Decimal(str(data['total_price'])),
                occurred_at=occurred_at,
            )
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            raise DomainError(f'Malformed booking record: {e!r}') from e
