"""
Order Command Repository Implementation

booking_id carries a unique constraint: the first insert wins, every
redelivery or competing consumer reads the winner's row back.
"""

from typing import AsyncContextManager, Callable

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from booking_pipeline.platform.exception.exceptions import OrderNotFound
from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.service.order.app.interface.i_order_command_repo import IOrderCommandRepo
from booking_pipeline.service.order.domain.entity.order_entity import Order, OrderStatus
from booking_pipeline.service.order.driven_adapter.model.order_model import OrderModel
from booking_pipeline.service.order.driven_adapter.repo.order_query_repo_impl import (
    OrderQueryRepoImpl,
)


class OrderCommandRepoImpl(IOrderCommandRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @staticmethod
    async def _get_model(session: AsyncSession, booking_id: str) -> OrderModel | None:
        result = await session.execute(
            select(OrderModel).where(OrderModel.booking_id == booking_id)
        )
        return result.scalar_one_or_none()

    @Logger.io
    async def get_or_create_pending(self, *, order: Order) -> tuple[Order, bool]:
        async with self.session_factory() as session:
            if existing := await self._get_model(session, order.booking_id):
                return OrderQueryRepoImpl._to_entity(existing), False

            order_model = OrderModel(
                booking_id=order.booking_id,
                customer_id=order.customer_id,
                event_id=order.event_id,
                ticket_count=order.ticket_count,
                total_price=order.total_price,
                status=OrderStatus.PENDING_INVENTORY.value,
                oversold_by=0,
            )
            session.add(order_model)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                Logger.base.info(
                    f'🏁 [ORDER] Lost insert race for booking_id={order.booking_id}, re-reading'
                )
                winner = await self._get_model(session, order.booking_id)
                if not winner:
                    raise
                return OrderQueryRepoImpl._to_entity(winner), False

            await session.refresh(order_model)
            return OrderQueryRepoImpl._to_entity(order_model), True

    @Logger.io
    async def save_status(self, *, order: Order) -> Order:
        async with self.session_factory() as session:
            result = await session.execute(
                update(OrderModel)
                .where(
                    OrderModel.booking_id == order.booking_id,
                    OrderModel.status == OrderStatus.PENDING_INVENTORY.value,
                )
                .values(status=order.status.value, oversold_by=order.oversold_by)
                .returning(OrderModel)
            )
            order_model = result.scalar_one_or_none()
            await session.commit()

            if order_model:
                return OrderQueryRepoImpl._to_entity(order_model)

            # Another consumer already finalized it; report what is stored
            current = await self._get_model(session, order.booking_id)
            if not current:
                raise OrderNotFound(order.booking_id)
            return OrderQueryRepoImpl._to_entity(current)
