from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from booking_pipeline.platform.config.di import Container
from booking_pipeline.platform.exception.exceptions import DomainError
from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.platform.state.keyed_lock import KeyedLock
from booking_pipeline.service.inventory.app.interface.i_event_inventory_command_repo import (
    IEventInventoryCommandRepo,
)
from booking_pipeline.service.shared_kernel.domain.value_object import DecrementResult


class DecrementInventoryUseCase:
    """
    Decrement inventory - the sole serialization point of the pipeline

    Flow:
    1. Validate ticket_count (> 0)
    2. Acquire the per-event lock (same event waits, other events proceed)
    3. Repository applies clamp-and-report under SELECT ... FOR UPDATE
       and records booking_id so replays are no-ops

    Oversell is reported in the result (oversold_by), never raised.
    """

    def __init__(
        self,
        *,
        event_inventory_command_repo: IEventInventoryCommandRepo,
        keyed_lock: KeyedLock,
    ) -> None:
        self.event_inventory_command_repo = event_inventory_command_repo
        self.keyed_lock = keyed_lock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        event_inventory_command_repo: IEventInventoryCommandRepo = Depends(
            Provide[Container.event_inventory_command_repo]
        ),
        keyed_lock: KeyedLock = Depends(Provide[Container.inventory_keyed_lock]),
    ) -> Self:
        return cls(event_inventory_command_repo=event_inventory_command_repo, keyed_lock=keyed_lock)

    @Logger.io
    async def decrement(self, *, event_id: int, ticket_count: int, booking_id: str) -> DecrementResult:
        if ticket_count <= 0:
            raise DomainError(f'ticket_count must be positive, got {ticket_count}')

        with self.tracer.start_as_current_span(
            'use_case.decrement_inventory',
            attributes={
                'event.id': event_id,
                'booking.id': booking_id,
                'ticket.count': ticket_count,
            },
        ):
            async with self.keyed_lock.hold(event_id):
                result = await self.event_inventory_command_repo.decrement(
                    event_id=event_id, ticket_count=ticket_count, booking_id=booking_id
                )

            if result.is_oversold:
                Logger.base.warning(
                    f'⚠️ [DECREMENT] Oversold event={event_id} booking_id={booking_id} '
                    f'oversold_by={result.oversold_by}, remaining clamped to {result.remaining}'
                )
            else:
                Logger.base.info(
                    f'📉 [DECREMENT] event={event_id} booking_id={booking_id} '
                    f'count={ticket_count} remaining={result.remaining} applied={result.applied}'
                )

            return result
