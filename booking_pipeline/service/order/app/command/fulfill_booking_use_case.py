from opentelemetry import trace

from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.service.order.app.dto.fulfillment_result import (
    FulfillmentOutcome,
    FulfillmentResult,
)
from booking_pipeline.service.order.app.interface.i_order_command_repo import IOrderCommandRepo
from booking_pipeline.service.order.domain.entity.order_entity import Order
from booking_pipeline.service.shared_kernel.app.interface.i_inventory_command_client import (
    IInventoryCommandClient,
)
from booking_pipeline.service.shared_kernel.domain.domain_event import BookingPlacedEvent


class FulfillBookingUseCase:
    """
    Fulfill one Booking Record (at-least-once delivery → exactly-once effect)

    Flow:
    1. Persist the order as pending_inventory (unique on booking_id)
    2. Terminal order already stored → duplicate delivery, absorbed
    3. Decrement inventory with the same booking_id (store dedups replays)
    4. Move the order to fulfilled, or reconciliation when the store reports oversell

    A crash between 1 and 4 leaves a pending order; the redelivered record
    resumes at step 3 without creating a second order.

    TransientStoreFailure from the decrement propagates so the consumer
    retries without acknowledging the record.
    """

    def __init__(
        self,
        *,
        order_command_repo: IOrderCommandRepo,
        inventory_client: IInventoryCommandClient,
    ) -> None:
        self.order_command_repo = order_command_repo
        self.inventory_client = inventory_client
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def fulfill(self, *, record: BookingPlacedEvent) -> FulfillmentResult:
        with self.tracer.start_as_current_span(
            'use_case.fulfill_booking',
            attributes={
                'booking.id': record.booking_id,
                'event.id': record.event_id,
                'ticket.count': record.ticket_count,
            },
        ) as span:
            order, created = await self.order_command_repo.get_or_create_pending(
                order=Order.create_pending(record=record)
            )

            if order.is_terminal:
                Logger.base.info(
                    f'🔁 [FULFILL] Duplicate delivery booking_id={record.booking_id} '
                    f'(order {order.id} already {order.status})'
                )
                span.set_attribute('fulfillment.outcome', FulfillmentOutcome.DUPLICATE)
                return FulfillmentResult(outcome=FulfillmentOutcome.DUPLICATE, order=order)

            if not created:
                Logger.base.warning(
                    f'♻️ [FULFILL] Resuming pending order {order.id} booking_id={record.booking_id}'
                )

            decrement = await self.inventory_client.decrement(
                event_id=record.event_id,
                ticket_count=record.ticket_count,
                booking_id=record.booking_id,
            )

            order.apply_decrement(decrement)
            order = await self.order_command_repo.save_status(order=order)

            if decrement.is_oversold:
                Logger.base.warning(
                    f'⚠️ [FULFILL] Order {order.id} flagged for reconciliation: '
                    f'event={record.event_id} oversold_by={decrement.oversold_by}'
                )
                outcome = FulfillmentOutcome.RECONCILIATION
            else:
                Logger.base.info(
                    f'✅ [FULFILL] Order {order.id} fulfilled: event={record.event_id} '
                    f'remaining={decrement.remaining}'
                )
                outcome = FulfillmentOutcome.FULFILLED

            span.set_attribute('fulfillment.outcome', outcome)
            return FulfillmentResult(outcome=outcome, order=order, decrement=decrement)
