from abc import ABC, abstractmethod
from typing import Optional

from booking_pipeline.service.booking.domain.entity.customer_entity import Customer


class ICustomerQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, customer_id: int) -> Optional[Customer]:
        pass
