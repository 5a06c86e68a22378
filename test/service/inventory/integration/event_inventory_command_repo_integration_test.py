"""
Integration tests for EventInventoryCommandRepoImpl against PostgreSQL

Covers the row lock, the decrement log that makes replays no-ops, and
clamp-and-report persisted in one transaction.
"""

import asyncio
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from booking_pipeline.platform.database.orm_db_setting import Database
from booking_pipeline.platform.exception.exceptions import EventNotFound
from booking_pipeline.service.inventory.driven_adapter.model import (
    EventInventoryModel,
    InventoryDecrementLogModel,
    VenueModel,
)
from booking_pipeline.service.inventory.driven_adapter.repo.event_inventory_command_repo_impl import (
    EventInventoryCommandRepoImpl,
)


CAPACITY = 10


@pytest_asyncio.fixture
async def event_id(database: Database) -> int:
    async with database.session() as session:
        venue = VenueModel(name='Main Hall', address='1 Concert Street', total_capacity=500)
        session.add(venue)
        await session.flush()
        event = EventInventoryModel(
            name='Opening Night',
            venue_id=venue.id,
            total_capacity=CAPACITY,
            remaining_capacity=CAPACITY,
            ticket_price=Decimal('20.00'),
        )
        session.add(event)
        await session.commit()
        return event.id


@pytest.fixture
def repo(database: Database) -> EventInventoryCommandRepoImpl:
    return EventInventoryCommandRepoImpl(session_factory=database.session)


async def _remaining(database: Database, event_id: int) -> int:
    async with database.session() as session:
        return await session.scalar(
            select(EventInventoryModel.remaining_capacity).where(EventInventoryModel.id == event_id)
        )


async def _log_rows(database: Database) -> int:
    async with database.session() as session:
        return await session.scalar(select(func.count()).select_from(InventoryDecrementLogModel))


@pytest.mark.integration
class TestEventInventoryCommandRepoDecrement:
    @pytest.mark.asyncio
    async def test_decrement_persists_capacity_and_log_row(self, repo, database, event_id) -> None:
        result = await repo.decrement(event_id=event_id, ticket_count=4, booking_id='b-4')

        assert (result.remaining, result.oversold_by, result.applied) == (6, 0, True)
        assert await _remaining(database, event_id) == 6
        async with database.session() as session:
            log = await session.scalar(
                select(InventoryDecrementLogModel).where(InventoryDecrementLogModel.booking_id == 'b-4')
            )
        assert (log.event_id, log.ticket_count, log.remaining_after) == (event_id, 4, 6)

    @pytest.mark.asyncio
    async def test_replay_returns_stored_outcome_without_decrementing(
        self, repo, database, event_id
    ) -> None:
        first = await repo.decrement(event_id=event_id, ticket_count=4, booking_id='b-4')
        await repo.decrement(event_id=event_id, ticket_count=3, booking_id='b-3')

        replay = await repo.decrement(event_id=event_id, ticket_count=4, booking_id='b-4')

        assert replay.applied is False
        assert (replay.remaining, replay.oversold_by) == (first.remaining, first.oversold_by)
        assert await _remaining(database, event_id) == 3
        assert await _log_rows(database) == 2

    @pytest.mark.asyncio
    async def test_oversell_is_clamped_at_zero_and_reported(self, repo, database, event_id) -> None:
        result = await repo.decrement(event_id=event_id, ticket_count=12, booking_id='b-12')

        assert (result.remaining, result.oversold_by, result.applied) == (0, 2, True)
        assert await _remaining(database, event_id) == 0

    @pytest.mark.asyncio
    async def test_unknown_event_writes_nothing(self, repo, database, event_id) -> None:
        with pytest.raises(EventNotFound):
            await repo.decrement(event_id=event_id + 100, ticket_count=1, booking_id='b-x')

        assert await _log_rows(database) == 0
        assert await _remaining(database, event_id) == CAPACITY

    @pytest.mark.asyncio
    async def test_concurrent_decrements_serialize_on_the_row_lock(
        self, repo, database, event_id
    ) -> None:
        results = await asyncio.gather(
            *(
                repo.decrement(event_id=event_id, ticket_count=3, booking_id=f'b-{i}')
                for i in range(5)
            )
        )

        # 15 tickets against 10 seats: no lost update, the shortfall is reported exactly once
        assert await _remaining(database, event_id) == 0
        assert sum(r.oversold_by for r in results) == 5
        assert sorted(r.remaining for r in results) == [0, 0, 1, 4, 7]
        assert await _log_rows(database) == 5
