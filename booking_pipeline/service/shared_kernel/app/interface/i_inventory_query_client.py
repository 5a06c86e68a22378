from abc import ABC, abstractmethod

from booking_pipeline.service.shared_kernel.domain.value_object import InventorySnapshot


class IInventoryQueryClient(ABC):
    """Port used by the booking service for the admission check."""

    @abstractmethod
    async def read_capacity(self, *, event_id: int) -> InventorySnapshot:
        """
        Raises:
            EventNotFound: event does not exist in the inventory store
            TransientStoreFailure: store unreachable or timed out
        """
        pass
