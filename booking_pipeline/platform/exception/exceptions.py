class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class ServiceUnavailableError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 503)


# ====== Booking pipeline taxonomy =======


class CustomerNotFound(NotFoundError):
    def __init__(self, customer_id: int) -> None:
        self.customer_id = customer_id
        super().__init__(f'Customer {customer_id} not found')


class EventNotFound(NotFoundError):
    def __init__(self, event_id: int) -> None:
        self.event_id = event_id
        super().__init__(f'Event {event_id} not found')


class VenueNotFound(NotFoundError):
    def __init__(self, venue_id: int) -> None:
        self.venue_id = venue_id
        super().__init__(f'Venue {venue_id} not found')


class OrderNotFound(NotFoundError):
    def __init__(self, order_ref: object) -> None:
        self.order_ref = order_ref
        super().__init__(f'Order {order_ref} not found')


class InsufficientInventory(ConflictError):
    """Admission-time rejection: requested tickets exceed capacity observed at check time."""

    def __init__(self, *, event_id: int, requested: int, remaining: int) -> None:
        self.event_id = event_id
        self.requested = requested
        self.remaining = remaining
        super().__init__(
            f'Not enough inventory for event {event_id}: requested={requested}, remaining={remaining}'
        )


class InventoryCheckUnavailable(ServiceUnavailableError):
    """Admission check could not complete in time; the booking is rejected (fail closed)."""


class TransientStoreFailure(ServiceUnavailableError):
    """Inventory store unreachable or timed out; the consumer retries the delivery."""
