from decimal import Decimal

from pydantic import BaseModel, Field


class EventInventoryResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'event_id': 1,
                'event': 'Spring Concert',
                'capacity': 10,
                'ticket_price': '20.00',
                'venue_id': 1,
            }
        },
    }

    event_id: int
    event: str
    capacity: int  # remaining capacity at read time
    ticket_price: Decimal
    venue_id: int


class DecrementRequest(BaseModel):
    ticket_count: int = Field(gt=0)
    booking_id: str = Field(min_length=1, max_length=36)

    model_config = {
        'json_schema_extra': {
            'example': {'ticket_count': 4, 'booking_id': '01936d8f-5e73-7c4e-a9c5-123456789abc'}
        },
    }


class DecrementResponse(BaseModel):
    event_id: int
    remaining: int
    oversold_by: int
    applied: bool


class VenueResponse(BaseModel):
    id: int
    name: str
    address: str
    total_capacity: int
