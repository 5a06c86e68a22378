from typing import List

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.service.inventory.app.command.decrement_inventory_use_case import (
    DecrementInventoryUseCase,
)
from booking_pipeline.service.inventory.app.query.get_event_inventory_use_case import (
    GetEventInventoryUseCase,
)
from booking_pipeline.service.inventory.app.query.get_venue_use_case import GetVenueUseCase
from booking_pipeline.service.inventory.app.query.list_event_inventories_use_case import (
    ListEventInventoriesUseCase,
)
from booking_pipeline.service.inventory.domain.entity.event_inventory_entity import EventInventory
from booking_pipeline.service.inventory.driving_adapter.http_controller.schema.inventory_schema import (
    DecrementRequest,
    DecrementResponse,
    EventInventoryResponse,
    VenueResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


def _to_response(event_inventory: EventInventory) -> EventInventoryResponse:
    return EventInventoryResponse(
        event_id=event_inventory.id,  # type: ignore[arg-type]
        event=event_inventory.name,
        capacity=event_inventory.remaining_capacity,
        ticket_price=event_inventory.ticket_price,
        venue_id=event_inventory.venue_id,
    )


@router.get('/events', response_model=List[EventInventoryResponse])
@Logger.io
async def list_events(
    use_case: ListEventInventoriesUseCase = Depends(ListEventInventoriesUseCase.depends),
) -> List[EventInventoryResponse]:
    return [_to_response(event_inventory) for event_inventory in await use_case.list_all()]


@router.get('/event/{event_id}')
@Logger.io
async def get_event_inventory(
    event_id: int,
    use_case: GetEventInventoryUseCase = Depends(GetEventInventoryUseCase.depends),
) -> EventInventoryResponse:
    return _to_response(await use_case.get_by_id(event_id=event_id))


@router.post('/event/{event_id}/decrement', status_code=status.HTTP_200_OK)
@Logger.io
async def decrement_inventory(
    event_id: int,
    request: DecrementRequest,
    use_case: DecrementInventoryUseCase = Depends(DecrementInventoryUseCase.depends),
) -> DecrementResponse:
    with tracer.start_as_current_span('controller.decrement_inventory') as span:
        span.set_attribute('event_id', event_id)
        span.set_attribute('booking_id', request.booking_id)

        result = await use_case.decrement(
            event_id=event_id,
            ticket_count=request.ticket_count,
            booking_id=request.booking_id,
        )
        return DecrementResponse(
            event_id=result.event_id,
            remaining=result.remaining,
            oversold_by=result.oversold_by,
            applied=result.applied,
        )


@router.get('/venue/{venue_id}')
@Logger.io
async def get_venue(
    venue_id: int,
    use_case: GetVenueUseCase = Depends(GetVenueUseCase.depends),
) -> VenueResponse:
    venue = await use_case.get_by_id(venue_id=venue_id)
    return VenueResponse(
        id=venue.id,  # type: ignore[arg-type]
        name=venue.name,
        address=venue.address,
        total_capacity=venue.total_capacity,
    )
