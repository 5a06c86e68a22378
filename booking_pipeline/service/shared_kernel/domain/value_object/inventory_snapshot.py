from decimal import Decimal

import attrs


@attrs.define(frozen=True)
class InventorySnapshot:
    """Capacity observed at read time; stale as soon as it is returned."""

    event_id: int
    name: str
    venue_id: int
    remaining: int
    unit_price: Decimal

    def can_cover(self, ticket_count: int) -> bool:
        return ticket_count <= self.remaining
