from typing import AsyncContextManager, Callable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.service.inventory.app.interface.i_venue_query_repo import IVenueQueryRepo
from booking_pipeline.service.inventory.domain.entity.venue_entity import Venue
from booking_pipeline.service.inventory.driven_adapter.model import VenueModel


class VenueQueryRepoImpl(IVenueQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def get_by_id(self, *, venue_id: int) -> Optional[Venue]:
        async with self.session_factory() as session:
            result = await session.execute(select(VenueModel).where(VenueModel.id == venue_id))
            venue_model = result.scalar_one_or_none()

            if not venue_model:
                return None

            return Venue(
                id=venue_model.id,
                name=venue_model.name,
                address=venue_model.address,
                total_capacity=venue_model.total_capacity,
            )
