from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.service.booking.app.command.submit_booking_use_case import (
    SubmitBookingUseCase,
)
from booking_pipeline.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    BookingConfirmationResponse,
    BookingSubmitRequest,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_202_ACCEPTED)
@Logger.io
async def submit_booking(
    request: BookingSubmitRequest,
    use_case: SubmitBookingUseCase = Depends(SubmitBookingUseCase.depends),
) -> BookingConfirmationResponse:
    with tracer.start_as_current_span('controller.submit_booking') as span:
        span.set_attribute('customer_id', request.customer_id)
        span.set_attribute('event_id', request.event_id)
        span.set_attribute('ticket_count', request.ticket_count)

        confirmation = await use_case.submit_booking(
            customer_id=request.customer_id,
            event_id=request.event_id,
            ticket_count=request.ticket_count,
        )

        return BookingConfirmationResponse(
            booking_id=confirmation.booking_id,
            customer_id=confirmation.customer_id,
            event_id=confirmation.event_id,
            ticket_count=confirmation.ticket_count,
            total_price=confirmation.total_price,
        )
