from typing import Optional

import attrs


@attrs.define(frozen=True)
class Venue:
    name: str
    address: str
    total_capacity: int
    id: Optional[int] = None
