from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from booking_pipeline.platform.config.di import Container
from booking_pipeline.platform.exception.exceptions import (
    CustomerNotFound,
    DomainError,
    InsufficientInventory,
    InventoryCheckUnavailable,
    TransientStoreFailure,
)
from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.service.booking.app.dto.booking_confirmation import BookingConfirmation
from booking_pipeline.service.booking.app.interface.i_booking_event_publisher import (
    IBookingEventPublisher,
)
from booking_pipeline.service.booking.app.interface.i_customer_query_repo import (
    ICustomerQueryRepo,
)
from booking_pipeline.service.shared_kernel.app.interface.i_inventory_query_client import (
    IInventoryQueryClient,
)
from booking_pipeline.service.shared_kernel.domain.domain_event import BookingPlacedEvent


class SubmitBookingUseCase:
    """
    Submit booking - admission check then publish (Booking → Kafka → Order)

    Flow:
    1. Validate ticket_count and resolve the customer
    2. Read remaining capacity and unit price from the inventory service (Fail Fast)
    3. Compute total_price once (unit price x ticket count, cents)
    4. Publish a BookingPlacedEvent keyed by event_id, await the broker ack
    5. Return the confirmation immediately; fulfillment happens downstream

    The capacity check is advisory: two bookings may both pass it before either
    decrement lands. The inventory decrement clamps and reports the oversell.
    """

    def __init__(
        self,
        *,
        customer_query_repo: ICustomerQueryRepo,
        inventory_client: IInventoryQueryClient,
        event_publisher: IBookingEventPublisher,
    ) -> None:
        self.customer_query_repo = customer_query_repo
        self.inventory_client = inventory_client
        self.event_publisher = event_publisher
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        customer_query_repo: ICustomerQueryRepo = Depends(Provide[Container.customer_query_repo]),
        inventory_client: IInventoryQueryClient = Depends(Provide[Container.inventory_client]),
        event_publisher: IBookingEventPublisher = Depends(
            Provide[Container.booking_event_publisher]
        ),
    ) -> Self:
        return cls(
            customer_query_repo=customer_query_repo,
            inventory_client=inventory_client,
            event_publisher=event_publisher,
        )

    @Logger.io
    async def submit_booking(
        self,
        *,
        customer_id: int,
        event_id: int,
        ticket_count: int,
    ) -> BookingConfirmation:
        """
        Raises:
            DomainError: ticket_count <= 0
            CustomerNotFound: unknown customer
            EventNotFound: unknown event
            InsufficientInventory: ticket_count exceeds remaining capacity observed now
            InventoryCheckUnavailable: capacity read timed out or failed (fail closed)
            EventPublishFailed: broker did not acknowledge the record
        """
        if ticket_count <= 0:
            raise DomainError(f'ticket_count must be positive, got {ticket_count}')

        with self.tracer.start_as_current_span(
            'use_case.submit_booking',
            attributes={
                'customer.id': customer_id,
                'event.id': event_id,
                'ticket.count': ticket_count,
            },
        ) as span:
            customer = await self.customer_query_repo.get_by_id(customer_id=customer_id)
            if not customer:
                raise CustomerNotFound(customer_id)

            # Fail closed: an unverifiable booking is rejected, never published
            try:
                snapshot = await self.inventory_client.read_capacity(event_id=event_id)
            except TransientStoreFailure as e:
                raise InventoryCheckUnavailable(
                    f'Inventory check unavailable for event {event_id}: {e.message}'
                ) from e

            if not snapshot.can_cover(ticket_count):
                raise InsufficientInventory(
                    event_id=event_id, requested=ticket_count, remaining=snapshot.remaining
                )

            event = BookingPlacedEvent.create(
                customer_id=customer_id,
                event_id=event_id,
                ticket_count=ticket_count,
                unit_price=snapshot.unit_price,
            )
            span.set_attribute('booking.id', event.booking_id)

            Logger.base.info(
                f'📝 [SUBMIT-BOOKING] booking_id={event.booking_id} customer={customer_id} '
                f'event={event_id} count={ticket_count} total={event.total_price} '
                f'(remaining at check={snapshot.remaining})'
            )

            await self.event_publisher.publish_booking_placed(event=event)
            Logger.base.info(f'🚀 [BOOKING→ORDER] Published BookingPlacedEvent {event.booking_id}')

            return BookingConfirmation.from_event(event)
