from decimal import Decimal
from typing import Optional

import attrs

from booking_pipeline.platform.exception.exceptions import DomainError
from booking_pipeline.service.shared_kernel.domain.value_object import (
    DecrementResult,
    InventorySnapshot,
)


def _validate_non_empty_string(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not value or not value.strip():
        raise ValueError(f'Event {attribute.name} cannot be empty')


def _validate_non_negative(instance: object, attribute: attrs.Attribute, value: int | Decimal) -> None:
    if value < 0:
        raise ValueError(f'Event {attribute.name} cannot be negative, got {value}')


@attrs.define
class EventInventory:
    name: str = attrs.field(validator=_validate_non_empty_string)
    venue_id: int
    total_capacity: int = attrs.field(validator=_validate_non_negative)
    remaining_capacity: int = attrs.field(validator=_validate_non_negative)
    ticket_price: Decimal = attrs.field(validator=_validate_non_negative)
    id: Optional[int] = None

    def decrement(self, ticket_count: int) -> DecrementResult:
        """
        Clamp-and-report: capacity never goes below zero; whatever could not be
        covered is reported as oversold_by instead of raised.
        """
        if ticket_count <= 0:
            raise DomainError(f'ticket_count must be positive, got {ticket_count}')

        remaining_before = self.remaining_capacity
        oversold_by = max(ticket_count - remaining_before, 0)
        self.remaining_capacity = max(remaining_before - ticket_count, 0)

        return DecrementResult(
            event_id=self.id,  # type: ignore[arg-type]
            remaining=self.remaining_capacity,
            oversold_by=oversold_by,
            applied=True,
        )

    def to_snapshot(self) -> InventorySnapshot:
        return InventorySnapshot(
            event_id=self.id,  # type: ignore[arg-type]
            name=self.name,
            venue_id=self.venue_id,
            remaining=self.remaining_capacity,
            unit_price=self.ticket_price,
        )
