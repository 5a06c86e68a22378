"""Shared Kernel Domain Events"""

from booking_pipeline.service.shared_kernel.domain.domain_event.booking_placed_event import (
    BookingPlacedEvent,
)
from booking_pipeline.service.shared_kernel.domain.domain_event.mq_domain_event import MqDomainEvent

__all__ = ['BookingPlacedEvent', 'MqDomainEvent']
