from abc import ABC, abstractmethod

from booking_pipeline.service.shared_kernel.domain.value_object import DecrementResult


class IEventInventoryCommandRepo(ABC):
    @abstractmethod
    async def decrement(self, *, event_id: int, ticket_count: int, booking_id: str) -> DecrementResult:
        """
        Atomically apply one decrement (row locked for the whole transaction).

        A booking_id already in the decrement log returns the stored outcome with
        applied=False and leaves capacity untouched.

        Raises:
            EventNotFound: no inventory row for event_id
        """
        pass
