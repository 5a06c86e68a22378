from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.service.inventory.app.interface.i_event_inventory_query_repo import (
    IEventInventoryQueryRepo,
)
from booking_pipeline.service.inventory.domain.entity.event_inventory_entity import EventInventory
from booking_pipeline.service.inventory.driven_adapter.model import EventInventoryModel


class EventInventoryQueryRepoImpl(IEventInventoryQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @staticmethod
    def _to_entity(model: EventInventoryModel) -> EventInventory:
        return EventInventory(
            id=model.id,
            name=model.name,
            venue_id=model.venue_id,
            total_capacity=model.total_capacity,
            remaining_capacity=model.remaining_capacity,
            ticket_price=model.ticket_price,
        )

    @Logger.io
    async def get_by_id(self, *, event_id: int) -> Optional[EventInventory]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(EventInventoryModel).where(EventInventoryModel.id == event_id)
            )
            event_model = result.scalar_one_or_none()

            if not event_model:
                return None

            return self._to_entity(event_model)

    @Logger.io
    async def list_all(self) -> List[EventInventory]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(EventInventoryModel).order_by(EventInventoryModel.id)
            )
            return [self._to_entity(model) for model in result.scalars().all()]
