from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from booking_pipeline.platform.config.di import Container
from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.service.order.app.interface.i_order_query_repo import IOrderQueryRepo
from booking_pipeline.service.order.domain.entity.order_entity import Order, OrderStatus


class ListReconciliationOrdersUseCase:
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
    async def list_orders(self) -> List[Order]:
        return await self.order_query_repo.list_by_status(status=OrderStatus.RECONCILIATION)
