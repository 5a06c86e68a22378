from abc import ABC, abstractmethod

from booking_pipeline.service.order.domain.entity.order_entity import Order


class IOrderCommandRepo(ABC):
    @abstractmethod
    async def get_or_create_pending(self, *, order: Order) -> tuple[Order, bool]:
        """
        Insert the order unless one with the same booking_id exists.

        Returns:
            (stored order, created) - created is False when the row already existed,
            including when a competing consumer won the insert race
        """
        pass

    @abstractmethod
    async def save_status(self, *, order: Order) -> Order:
        """Persist a pending_inventory → terminal transition; returns the stored row."""
        pass
