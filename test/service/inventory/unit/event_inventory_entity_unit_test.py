from decimal import Decimal

import pytest

from booking_pipeline.platform.exception.exceptions import DomainError
from booking_pipeline.service.inventory.domain.entity.event_inventory_entity import EventInventory


@pytest.mark.unit
class TestEventInventoryDecrement:
    @pytest.mark.parametrize(
        'remaining, ticket_count, expected_remaining, expected_oversold',
        [
            (10, 4, 6, 0),
            (10, 10, 0, 0),
            (6, 8, 0, 2),
            (0, 3, 0, 3),
        ],
    )
    def test_clamp_and_report(
        self,
        event_inventory: EventInventory,
        remaining: int,
        ticket_count: int,
        expected_remaining: int,
        expected_oversold: int,
    ) -> None:
        event_inventory.remaining_capacity = remaining

        result = event_inventory.decrement(ticket_count)

        assert result.remaining == expected_remaining
        assert result.oversold_by == expected_oversold
        assert result.is_oversold == (expected_oversold > 0)
        assert result.applied
        assert event_inventory.remaining_capacity == expected_remaining

    @pytest.mark.parametrize('ticket_count', [0, -1])
    def test_non_positive_ticket_count_is_rejected(
        self, event_inventory: EventInventory, ticket_count: int
    ) -> None:
        with pytest.raises(DomainError):
            event_inventory.decrement(ticket_count)
        assert event_inventory.remaining_capacity == 10

    def test_negative_capacity_cannot_be_constructed(self) -> None:
        with pytest.raises(ValueError):
            EventInventory(
                name='Broken',
                venue_id=1,
                total_capacity=10,
                remaining_capacity=-1,
                ticket_price=Decimal('1.00'),
            )

    def test_snapshot_reports_remaining_and_price(self, event_inventory: EventInventory) -> None:
        snapshot = event_inventory.to_snapshot()

        assert snapshot.event_id == 1
        assert snapshot.remaining == 10
        assert snapshot.unit_price == Decimal('20.00')
        assert snapshot.can_cover(10)
        assert not snapshot.can_cover(11)
