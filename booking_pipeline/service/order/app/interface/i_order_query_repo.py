from abc import ABC, abstractmethod
from typing import List, Optional

from booking_pipeline.service.order.domain.entity.order_entity import Order, OrderStatus


class IOrderQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, order_id: int) -> Optional[Order]:
        pass

    @abstractmethod
    async def get_by_booking_id(self, *, booking_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def list_by_status(self, *, status: OrderStatus) -> List[Order]:
        pass
