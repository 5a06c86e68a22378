from decimal import Decimal
from typing import List, Optional

from fastapi.testclient import TestClient
import pytest

from booking_pipeline.service.order.app.interface.i_order_query_repo import IOrderQueryRepo
from booking_pipeline.service.order.app.query.get_order_use_case import GetOrderUseCase
from booking_pipeline.service.order.app.query.list_reconciliation_orders_use_case import (
    ListReconciliationOrdersUseCase,
)
from booking_pipeline.service.order.domain.entity.order_entity import Order, OrderStatus
from booking_pipeline.service.order.main import app


class StubOrderQueryRepo(IOrderQueryRepo):
    def __init__(self, orders: List[Order]) -> None:
        self.orders = orders

    async def get_by_id(self, *, order_id: int) -> Optional[Order]:
        return next((o for o in self.orders if o.id == order_id), None)

    async def get_by_booking_id(self, *, booking_id: str) -> Optional[Order]:
        return next((o for o in self.orders if o.booking_id == booking_id), None)

    async def list_by_status(self, *, status: OrderStatus) -> List[Order]:
        return [o for o in self.orders if o.status == status]


@pytest.fixture
def client():
    repo = StubOrderQueryRepo(
        [
            Order(
                id=1,
                booking_id='b-4',
                customer_id=1,
                event_id=1,
                ticket_count=4,
                total_price=Decimal('80.00'),
                status=OrderStatus.FULFILLED,
            ),
            Order(
                id=2,
                booking_id='b-8',
                customer_id=1,
                event_id=1,
                ticket_count=8,
                total_price=Decimal('160.00'),
                status=OrderStatus.RECONCILIATION,
                oversold_by=2,
            ),
        ]
    )
    app.dependency_overrides[GetOrderUseCase.depends] = lambda: GetOrderUseCase(order_query_repo=repo)
    app.dependency_overrides[ListReconciliationOrdersUseCase.depends] = (
        lambda: ListReconciliationOrdersUseCase(order_query_repo=repo)
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.mark.unit
class TestOrderController:
    def test_get_order_by_booking_id(self, client) -> None:
        response = client.get('/api/order/booking/b-4')

        assert response.status_code == 200
        assert response.json()['status'] == 'fulfilled'
        assert response.json()['total_price'] == '80.00'

    def test_unconsumed_booking_returns_404(self, client) -> None:
        assert client.get('/api/order/booking/unknown').status_code == 404

    def test_get_order_by_id(self, client) -> None:
        assert client.get('/api/order/2').json()['booking_id'] == 'b-8'
        assert client.get('/api/order/99').status_code == 404

    def test_reconciliation_queue_lists_oversold_orders(self, client) -> None:
        response = client.get('/api/order/reconciliation')

        assert response.status_code == 200
        [order] = response.json()
        assert order['booking_id'] == 'b-8'
        assert order['oversold_by'] == 2
