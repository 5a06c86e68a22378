from decimal import Decimal

from pydantic import BaseModel


class BookingSubmitRequest(BaseModel):
    customer_id: int
    event_id: int
    ticket_count: int

    model_config = {
        'json_schema_extra': {'example': {'customer_id': 1, 'event_id': 1, 'ticket_count': 4}},
    }


class BookingConfirmationResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'booking_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',  # UUID7
                'customer_id': 1,
                'event_id': 1,
                'ticket_count': 4,
                'total_price': '80.00',
            }
        },
    }

    booking_id: str
    customer_id: int
    event_id: int
    ticket_count: int
    total_price: Decimal
