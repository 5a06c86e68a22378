from decimal import Decimal

import pytest

from booking_pipeline.platform.exception.exceptions import DomainError
from booking_pipeline.service.order.domain.entity.order_entity import Order, OrderStatus
from booking_pipeline.service.shared_kernel.domain.value_object import DecrementResult


@pytest.fixture
def pending_order(booking_record) -> Order:
    return Order.create_pending(record=booking_record)


@pytest.mark.unit
class TestOrderEntity:
    def test_create_pending_copies_record_fields(self, booking_record, pending_order) -> None:
        assert pending_order.status == OrderStatus.PENDING_INVENTORY
        assert pending_order.booking_id == booking_record.booking_id
        assert pending_order.total_price == Decimal('80.00')
        assert pending_order.oversold_by == 0
        assert not pending_order.is_terminal

    def test_covered_decrement_fulfills(self, pending_order) -> None:
        pending_order.apply_decrement(DecrementResult(event_id=1, remaining=6))

        assert pending_order.status == OrderStatus.FULFILLED
        assert pending_order.is_terminal
        assert pending_order.updated_at is not None

    def test_oversold_decrement_flags_reconciliation(self, pending_order) -> None:
        pending_order.apply_decrement(DecrementResult(event_id=1, remaining=0, oversold_by=2))

        assert pending_order.status == OrderStatus.RECONCILIATION
        assert pending_order.oversold_by == 2
        assert pending_order.is_terminal

    def test_terminal_order_cannot_transition_again(self, pending_order) -> None:
        pending_order.mark_fulfilled()

        with pytest.raises(DomainError):
            pending_order.flag_for_reconciliation(oversold_by=1)
        with pytest.raises(DomainError):
            pending_order.mark_fulfilled()

    def test_reconciliation_requires_positive_oversell(self, pending_order) -> None:
        with pytest.raises(DomainError):
            pending_order.flag_for_reconciliation(oversold_by=0)
        assert pending_order.status == OrderStatus.PENDING_INVENTORY
