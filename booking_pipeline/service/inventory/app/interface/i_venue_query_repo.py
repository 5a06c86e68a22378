from abc import ABC, abstractmethod
from typing import Optional

from booking_pipeline.service.inventory.domain.entity.venue_entity import Venue


class IVenueQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, venue_id: int) -> Optional[Venue]:
        pass
