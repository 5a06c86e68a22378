from abc import ABC, abstractmethod
from typing import List, Optional

from booking_pipeline.service.inventory.domain.entity.event_inventory_entity import EventInventory


class IEventInventoryQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, event_id: int) -> Optional[EventInventory]:
        pass

    @abstractmethod
    async def list_all(self) -> List[EventInventory]:
        pass
