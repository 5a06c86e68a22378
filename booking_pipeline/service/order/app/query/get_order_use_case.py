from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from booking_pipeline.platform.config.di import Container
from booking_pipeline.platform.exception.exceptions import OrderNotFound
from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.service.order.app.interface.i_order_query_repo import IOrderQueryRepo
from booking_pipeline.service.order.domain.entity.order_entity import Order


class GetOrderUseCase:
    """Downstream status of a booking: pending_inventory, fulfilled or reconciliation."""

    def __init__(self, *, order_query_repo: IOrderQueryRepo) -> None:
        self.order_query_repo = order_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        order_query_repo: IOrderQueryRepo = Depends(Provide[Container.order_query_repo]),
    ) -> Self:
        return cls(order_query_repo=order_query_repo)

    @Logger.io
    async def get_by_id(self, *, order_id: int) -> Order:
        order = await self.order_query_repo.get_by_id(order_id=order_id)
        if not order:
            raise OrderNotFound(order_id)
        return order

    @Logger.io
    async def get_by_booking_id(self, *, booking_id: str) -> Order:
        # Not found yet may simply mean the record has not been consumed
        order = await self.order_query_repo.get_by_booking_id(booking_id=booking_id)
        if not order:
            raise OrderNotFound(booking_id)
        return order
