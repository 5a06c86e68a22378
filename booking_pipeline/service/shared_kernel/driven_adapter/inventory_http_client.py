"""
Inventory Service HTTP Client

Adapter implementing both inventory ports over the inventory service's HTTP API.
Shared by the booking service (admission read) and the order service (decrement).

Error mapping:
- 404 → EventNotFound
- 400 → DomainError
- timeout / transport error / 5xx → TransientStoreFailure
"""

from decimal import Decimal
from typing import Any, Dict, Optional

import anyio
import httpx

from booking_pipeline.platform.config.core_setting import settings
from booking_pipeline.platform.exception.exceptions import (
    DomainError,
    EventNotFound,
    TransientStoreFailure,
)
from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.platform.observability.tracing import inject_trace_context
from booking_pipeline.service.shared_kernel.app.interface.i_inventory_command_client import (
    IInventoryCommandClient,
)
from booking_pipeline.service.shared_kernel.app.interface.i_inventory_query_client import (
    IInventoryQueryClient,
)
from booking_pipeline.service.shared_kernel.domain.value_object import (
    DecrementResult,
    InventorySnapshot,
)


class InventoryHttpClient(IInventoryQueryClient, IInventoryCommandClient):
    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        read_timeout: Optional[float] = None,
        decrement_timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.INVENTORY_SERVICE_URL).rstrip('/')
        self.read_timeout = read_timeout or settings.INVENTORY_READ_TIMEOUT_SECONDS
        self.decrement_timeout = decrement_timeout or settings.INVENTORY_DECREMENT_TIMEOUT_SECONDS
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            headers={'Content-Type': 'application/json', 'User-Agent': 'booking-pipeline-client'},
        )

    async def close(self) -> None:
        await self.client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        event_id: int,
        timeout: float,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        try:
            # fail_after bounds the whole call (connect + retries + body), httpx bounds each phase
            with anyio.fail_after(timeout):
                response = await self.client.request(
                    method,
                    path,
                    json=json,
                    headers=inject_trace_context(),
                    timeout=timeout,
                )
        except (TimeoutError, httpx.TimeoutException) as e:
            raise TransientStoreFailure(
                f'Inventory {method} {path} timed out after {timeout}s'
            ) from e
        except httpx.TransportError as e:
            raise TransientStoreFailure(f'Inventory {method} {path} unreachable: {e}') from e

        if response.status_code == 404:
            raise EventNotFound(event_id)
        if response.status_code >= 500:
            raise TransientStoreFailure(
                f'Inventory {method} {path} failed with {response.status_code}'
            )
        if response.status_code >= 400:
            raise DomainError(str(response.json().get('detail', response.text)))

        return response.json()

    @Logger.io
    async def read_capacity(self, *, event_id: int) -> InventorySnapshot:
        body = await self._request(
            'GET',
            f'/api/inventory/event/{event_id}',
            event_id=event_id,
            timeout=self.read_timeout,
        )
        return InventorySnapshot(
            event_id=int(body['event_id']),
            name=body['event'],
            venue_id=int(body['venue_id']),
            remaining=int(body['capacity']),
            unit_price=Decimal(str(body['ticket_price'])),
        )

    @Logger.io
    async def decrement(self, *, event_id: int, ticket_count: int, booking_id: str) -> DecrementResult:
        body = await self._request(
            'POST',
            f'/api/inventory/event/{event_id}/decrement',
            event_id=event_id,
            timeout=self.decrement_timeout,
            json={'ticket_count': ticket_count, 'booking_id': booking_id},
        )
        return DecrementResult(
            event_id=int(body['event_id']),
            remaining=int(body['remaining']),
            oversold_by=int(body['oversold_by']),
            applied=bool(body['applied']),
        )
