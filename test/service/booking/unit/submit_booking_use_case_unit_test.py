"""
Unit tests for SubmitBookingUseCase

Tests the admission flow:
1. ticket_count and customer validation
2. Capacity check against the inventory service (Fail Fast, fail closed)
3. total_price computed once at admission
4. Exactly one Booking Record published per accepted booking
"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from booking_pipeline.platform.exception.exceptions import (
    CustomerNotFound,
    DomainError,
    EventNotFound,
    InsufficientInventory,
    InventoryCheckUnavailable,
    TransientStoreFailure,
)
from booking_pipeline.platform.message_queue.event_publisher import EventPublishFailed
from booking_pipeline.service.booking.app.command.submit_booking_use_case import (
    SubmitBookingUseCase,
)


@pytest.fixture
def submit_booking_use_case(customer_repo, inventory_client, event_publisher) -> SubmitBookingUseCase:
    return SubmitBookingUseCase(
        customer_query_repo=customer_repo,
        inventory_client=inventory_client,
        event_publisher=event_publisher,
    )


@pytest.mark.unit
class TestSubmitBookingUseCase:
    @pytest.mark.asyncio
    async def test_accepts_booking_and_publishes_one_record(
        self, submit_booking_use_case, event_publisher, inventory_repo
    ) -> None:
        confirmation = await submit_booking_use_case.submit_booking(
            customer_id=1, event_id=1, ticket_count=4
        )

        assert confirmation.total_price == Decimal('80.00')
        assert confirmation.ticket_count == 4
        assert len(event_publisher.published) == 1

        record = event_publisher.published[0]
        assert record.booking_id == confirmation.booking_id
        assert record.event_id == 1
        assert record.customer_id == 1
        assert record.total_price == Decimal('80.00')

        # Admission never touches capacity
        assert inventory_repo.events[1].remaining_capacity == 10

    @pytest.mark.asyncio
    async def test_every_accepted_booking_gets_a_distinct_booking_id(
        self, submit_booking_use_case, event_publisher
    ) -> None:
        first = await submit_booking_use_case.submit_booking(customer_id=1, event_id=1, ticket_count=1)
        second = await submit_booking_use_case.submit_booking(customer_id=1, event_id=1, ticket_count=1)

        assert first.booking_id != second.booking_id
        assert [r.booking_id for r in event_publisher.published] == [
            first.booking_id,
            second.booking_id,
        ]

    @pytest.mark.asyncio
    async def test_rejects_when_request_exceeds_remaining_capacity(
        self, submit_booking_use_case, event_publisher
    ) -> None:
        with pytest.raises(InsufficientInventory) as exc_info:
            await submit_booking_use_case.submit_booking(customer_id=1, event_id=1, ticket_count=11)

        assert exc_info.value.remaining == 10
        assert exc_info.value.status_code == 409
        assert event_publisher.published == []

    @pytest.mark.asyncio
    async def test_exact_remaining_capacity_is_accepted(
        self, submit_booking_use_case, event_publisher
    ) -> None:
        confirmation = await submit_booking_use_case.submit_booking(
            customer_id=1, event_id=1, ticket_count=10
        )

        assert confirmation.total_price == Decimal('200.00')
        assert len(event_publisher.published) == 1

    @pytest.mark.asyncio
    async def test_unknown_event_publishes_nothing(
        self, submit_booking_use_case, event_publisher
    ) -> None:
        with pytest.raises(EventNotFound):
            await submit_booking_use_case.submit_booking(customer_id=1, event_id=999, ticket_count=1)

        assert event_publisher.published == []

    @pytest.mark.asyncio
    async def test_unknown_customer_is_rejected_before_inventory_read(
        self, customer_repo, event_publisher
    ) -> None:
        inventory_client = AsyncMock()
        use_case = SubmitBookingUseCase(
            customer_query_repo=customer_repo,
            inventory_client=inventory_client,
            event_publisher=event_publisher,
        )

        with pytest.raises(CustomerNotFound):
            await use_case.submit_booking(customer_id=42, event_id=1, ticket_count=1)

        inventory_client.read_capacity.assert_not_awaited()
        assert event_publisher.published == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize('ticket_count', [0, -3])
    async def test_non_positive_ticket_count_is_rejected(
        self, submit_booking_use_case, event_publisher, ticket_count: int
    ) -> None:
        with pytest.raises(DomainError):
            await submit_booking_use_case.submit_booking(
                customer_id=1, event_id=1, ticket_count=ticket_count
            )

        assert event_publisher.published == []

    @pytest.mark.asyncio
    async def test_inventory_timeout_fails_closed(self, customer_repo, event_publisher) -> None:
        inventory_client = AsyncMock()
        inventory_client.read_capacity.side_effect = TransientStoreFailure('read timed out')
        use_case = SubmitBookingUseCase(
            customer_query_repo=customer_repo,
            inventory_client=inventory_client,
            event_publisher=event_publisher,
        )

        with pytest.raises(InventoryCheckUnavailable) as exc_info:
            await use_case.submit_booking(customer_id=1, event_id=1, ticket_count=1)

        assert exc_info.value.status_code == 503
        assert event_publisher.published == []

    @pytest.mark.asyncio
    async def test_publish_failure_is_surfaced(self, customer_repo, inventory_client) -> None:
        publisher = AsyncMock()
        publisher.publish_booking_placed.side_effect = EventPublishFailed('no broker ack')
        use_case = SubmitBookingUseCase(
            customer_query_repo=customer_repo,
            inventory_client=inventory_client,
            event_publisher=publisher,
        )

        with pytest.raises(EventPublishFailed):
            await use_case.submit_booking(customer_id=1, event_id=1, ticket_count=2)

        publisher.publish_booking_placed.assert_awaited_once()
