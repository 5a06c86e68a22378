"""
API tests for POST /api/booking

The lifespan is not entered (no Kafka, no database); the use case is wired to
in-memory adapters through FastAPI dependency overrides.
"""

from unittest.mock import AsyncMock

from fastapi.testclient import TestClient
import pytest

from booking_pipeline.platform.exception.exceptions import TransientStoreFailure
from booking_pipeline.service.booking.app.command.submit_booking_use_case import (
    SubmitBookingUseCase,
)
from booking_pipeline.service.booking.main import app


BOOKING_URL = '/api/booking'


@pytest.fixture
def client_with(customer_repo, event_publisher):
    def _build(inventory_client) -> TestClient:
        use_case = SubmitBookingUseCase(
            customer_query_repo=customer_repo,
            inventory_client=inventory_client,
            event_publisher=event_publisher,
        )
        app.dependency_overrides[SubmitBookingUseCase.depends] = lambda: use_case
        return TestClient(app)

    yield _build
    app.dependency_overrides.clear()


@pytest.mark.unit
class TestBookingController:
    def test_accepted_booking_returns_202_with_total_price(
        self, client_with, inventory_client, event_publisher
    ) -> None:
        response = client_with(inventory_client).post(
            BOOKING_URL, json={'customer_id': 1, 'event_id': 1, 'ticket_count': 4}
        )

        assert response.status_code == 202
        body = response.json()
        assert body['total_price'] == '80.00'
        assert body['ticket_count'] == 4
        assert body['booking_id'] == event_publisher.published[0].booking_id

    def test_insufficient_inventory_returns_409(
        self, client_with, inventory_client, event_publisher
    ) -> None:
        response = client_with(inventory_client).post(
            BOOKING_URL, json={'customer_id': 1, 'event_id': 1, 'ticket_count': 11}
        )

        assert response.status_code == 409
        assert 'Not enough inventory' in response.json()['detail']
        assert event_publisher.published == []

    def test_unknown_event_returns_404(self, client_with, inventory_client) -> None:
        response = client_with(inventory_client).post(
            BOOKING_URL, json={'customer_id': 1, 'event_id': 999, 'ticket_count': 1}
        )

        assert response.status_code == 404
        assert response.json()['detail'] == 'Event 999 not found'

    def test_unknown_customer_returns_404(self, client_with, inventory_client) -> None:
        response = client_with(inventory_client).post(
            BOOKING_URL, json={'customer_id': 77, 'event_id': 1, 'ticket_count': 1}
        )

        assert response.status_code == 404

    def test_inventory_unavailable_returns_503(self, client_with, event_publisher) -> None:
        inventory_client = AsyncMock()
        inventory_client.read_capacity.side_effect = TransientStoreFailure('timed out')

        response = client_with(inventory_client).post(
            BOOKING_URL, json={'customer_id': 1, 'event_id': 1, 'ticket_count': 1}
        )

        assert response.status_code == 503
        assert response.headers['Retry-After'] == '1'
        assert event_publisher.published == []

    def test_invalid_ticket_count_returns_400(self, client_with, inventory_client) -> None:
        response = client_with(inventory_client).post(
            BOOKING_URL, json={'customer_id': 1, 'event_id': 1, 'ticket_count': 0}
        )

        assert response.status_code == 400

    def test_missing_field_returns_400(self, client_with, inventory_client) -> None:
        response = client_with(inventory_client).post(BOOKING_URL, json={'customer_id': 1})

        assert response.status_code == 400

    def test_health(self, client_with, inventory_client) -> None:
        response = client_with(inventory_client).get('/health')

        assert response.status_code == 200
        assert response.json() == {'status': 'healthy', 'service': 'booking-service'}
