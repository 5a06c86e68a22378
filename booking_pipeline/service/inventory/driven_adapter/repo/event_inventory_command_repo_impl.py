"""
Event Inventory Command Repository Implementation

Single write path for capacity. Each decrement runs in one transaction:
1. SELECT ... FOR UPDATE on the event row (serializes every replica)
2. Look up booking_id in the decrement log (replay → stored outcome)
3. Apply clamp-and-report on the entity, write back, append a log row
"""

from typing import AsyncContextManager, Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_pipeline.platform.exception.exceptions import EventNotFound
from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.service.inventory.app.interface.i_event_inventory_command_repo import (
    IEventInventoryCommandRepo,
)
from booking_pipeline.service.inventory.driven_adapter.model import (
    EventInventoryModel,
    InventoryDecrementLogModel,
)
from booking_pipeline.service.inventory.driven_adapter.repo.event_inventory_query_repo_impl import (
    EventInventoryQueryRepoImpl,
)
from booking_pipeline.service.shared_kernel.domain.value_object import DecrementResult


class EventInventoryCommandRepoImpl(IEventInventoryCommandRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def decrement(self, *, event_id: int, ticket_count: int, booking_id: str) -> DecrementResult:
        async with self.session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    select(EventInventoryModel)
                    .where(EventInventoryModel.id == event_id)
                    .with_for_update()
                )
                event_model = result.scalar_one_or_none()
                if not event_model:
                    raise EventNotFound(event_id)

                log_result = await session.execute(
                    select(InventoryDecrementLogModel).where(
                        InventoryDecrementLogModel.booking_id == booking_id
                    )
                )
                if existing := log_result.scalar_one_or_none():
                    Logger.base.info(
                        f'🔁 [DECREMENT] Replay booking_id={booking_id}, returning stored outcome'
                    )
                    return DecrementResult(
                        event_id=existing.event_id,
                        remaining=existing.remaining_after,
                        oversold_by=existing.oversold_by,
                        applied=False,
                    )

                event_inventory = EventInventoryQueryRepoImpl._to_entity(event_model)
                decrement_result = event_inventory.decrement(ticket_count)

                event_model.remaining_capacity = event_inventory.remaining_capacity
                session.add(
                    InventoryDecrementLogModel(
                        booking_id=booking_id,
                        event_id=event_id,
                        ticket_count=ticket_count,
                        remaining_after=decrement_result.remaining,
                        oversold_by=decrement_result.oversold_by,
                    )
                )

            return decrement_result
