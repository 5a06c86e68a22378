import attrs


@attrs.define(frozen=True)
class DecrementResult:
    """
    Outcome of one inventory decrement.

    remaining: capacity after the decrement, clamped at 0
    oversold_by: tickets that could not be covered (0 when fully covered)
    applied: False when the booking_id was already applied and this is a replay
    """

    event_id: int
    remaining: int
    oversold_by: int = 0
    applied: bool = True

    @property
    def is_oversold(self) -> bool:
        return self.oversold_by > 0
