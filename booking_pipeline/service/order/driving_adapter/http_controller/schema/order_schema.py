from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from booking_pipeline.service.order.domain.entity.order_entity import Order


class OrderResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': 1,
                'booking_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'customer_id': 1,
                'event_id': 1,
                'ticket_count': 8,
                'total_price': '160.00',
                'status': 'reconciliation',
                'oversold_by': 2,
                'created_at': '2025-01-10T10:30:00Z',
                'updated_at': '2025-01-10T10:30:01Z',
            }
        },
    }

    id: int
    booking_id: str
    customer_id: int
    event_id: int
    ticket_count: int
    total_price: Decimal
    status: str
    oversold_by: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, order: Order) -> 'OrderResponse':
        return cls(
            id=order.id,  # type: ignore[arg-type]
            booking_id=order.booking_id,
            customer_id=order.customer_id,
            event_id=order.event_id,
            ticket_count=order.ticket_count,
            total_price=order.total_price,
            status=order.status.value,
            oversold_by=order.oversold_by,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
