from datetime import datetime, timezone
from decimal import Decimal
from enum import StrEnum
from typing import Optional

import attrs

from booking_pipeline.platform.exception.exceptions import DomainError
from booking_pipeline.service.shared_kernel.domain.domain_event import BookingPlacedEvent
from booking_pipeline.service.shared_kernel.domain.value_object import DecrementResult


class OrderStatus(StrEnum):
    PENDING_INVENTORY = 'pending_inventory'
    FULFILLED = 'fulfilled'
    RECONCILIATION = 'reconciliation'


TERMINAL_STATUSES = frozenset({OrderStatus.FULFILLED, OrderStatus.RECONCILIATION})


@attrs.define
class Order:
    booking_id: str
    customer_id: int
    event_id: int
    ticket_count: int
    total_price: Decimal
    status: OrderStatus = OrderStatus.PENDING_INVENTORY
    oversold_by: int = 0
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create_pending(cls, *, record: BookingPlacedEvent) -> 'Order':
        """Business fields are copied verbatim from the record; price is never recomputed."""
        return cls(
            booking_id=record.booking_id,
            customer_id=record.customer_id,
            event_id=record.event_id,
            ticket_count=record.ticket_count,
            total_price=record.total_price,
        )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def apply_decrement(self, result: DecrementResult) -> None:
        if result.is_oversold:
            self.flag_for_reconciliation(oversold_by=result.oversold_by)
        else:
            self.mark_fulfilled()

    def mark_fulfilled(self) -> None:
        self._ensure_pending()
        self.status = OrderStatus.FULFILLED
        self.updated_at = datetime.now(timezone.utc)

    def flag_for_reconciliation(self, *, oversold_by: int) -> None:
        self._ensure_pending()
        if oversold_by <= 0:
            raise DomainError(f'oversold_by must be positive, got {oversold_by}')
        self.status = OrderStatus.RECONCILIATION
        self.oversold_by = oversold_by
        self.updated_at = datetime.now(timezone.utc)

    def _ensure_pending(self) -> None:
        # Status only moves forward out of pending_inventory
        if self.status != OrderStatus.PENDING_INVENTORY:
            raise DomainError(
                f'Order {self.booking_id} already {self.status}, cannot transition again'
            )
