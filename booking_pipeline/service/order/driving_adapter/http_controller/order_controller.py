from typing import List

from fastapi import APIRouter, Depends

from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.service.order.app.query.get_order_use_case import GetOrderUseCase
from booking_pipeline.service.order.app.query.list_reconciliation_orders_use_case import (
    ListReconciliationOrdersUseCase,
)
from booking_pipeline.service.order.driving_adapter.http_controller.schema.order_schema import (
    OrderResponse,
)


router = APIRouter()


# Declared before /{order_id} so the literal path wins
@router.get('/reconciliation', response_model=List[OrderResponse])
@Logger.io
async def list_reconciliation_orders(
    use_case: ListReconciliationOrdersUseCase = Depends(ListReconciliationOrdersUseCase.depends),
) -> List[OrderResponse]:
    return [OrderResponse.from_entity(order) for order in await use_case.list_orders()]


@router.get('/booking/{booking_id}')
@Logger.io
async def get_order_by_booking(
    booking_id: str,
    use_case: GetOrderUseCase = Depends(GetOrderUseCase.depends),
) -> OrderResponse:
    return OrderResponse.from_entity(await use_case.get_by_booking_id(booking_id=booking_id))


@router.get('/{order_id}')
@Logger.io
async def get_order(
    order_id: int,
    use_case: GetOrderUseCase = Depends(GetOrderUseCase.depends),
) -> OrderResponse:
    return OrderResponse.from_entity(await use_case.get_by_id(order_id=order_id))
