from abc import ABC, abstractmethod

from booking_pipeline.service.shared_kernel.domain.value_object import DecrementResult


class IInventoryCommandClient(ABC):
    """Port used by the order service to apply a decrement."""

    @abstractmethod
    async def decrement(self, *, event_id: int, ticket_count: int, booking_id: str) -> DecrementResult:
        """
        Idempotent on booking_id: a replay returns the stored result with applied=False.

        Raises:
            EventNotFound: event does not exist in the inventory store
            TransientStoreFailure: store unreachable or timed out
        """
        pass
