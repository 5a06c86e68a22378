from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.service.order.app.interface.i_order_query_repo import IOrderQueryRepo
from booking_pipeline.service.order.domain.entity.order_entity import Order, OrderStatus
from booking_pipeline.service.order.driven_adapter.model.order_model import OrderModel


class OrderQueryRepoImpl(IOrderQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @staticmethod
    def _to_entity(model: OrderModel) -> Order:
        return Order(
            id=model.id,
            booking_id=model.booking_id,
            customer_id=model.customer_id,
            event_id=model.event_id,
            ticket_count=model.ticket_count,
            total_price=model.total_price,
            status=OrderStatus(model.status),
            oversold_by=model.oversold_by,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @Logger.io
    async def get_by_id(self, *, order_id: int) -> Optional[Order]:
        async with self.session_factory() as session:
            result = await session.execute(select(OrderModel).where(OrderModel.id == order_id))
            order_model = result.scalar_one_or_none()
            return self._to_entity(order_model) if order_model else None

    @Logger.io
    async def get_by_booking_id(self, *, booking_id: str) -> Optional[Order]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(OrderModel).where(OrderModel.booking_id == booking_id)
            )
            order_model = result.scalar_one_or_none()
            return self._to_entity(order_model) if order_model else None

    @Logger.io
    async def list_by_status(self, *, status: OrderStatus) -> List[Order]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(OrderModel).where(OrderModel.status == status.value).order_by(OrderModel.id)
            )
            return [self._to_entity(model) for model in result.scalars().all()]
