from typing import Optional

import attrs


@attrs.define(frozen=True)
class Customer:
    """Externally provisioned; read-only inside the pipeline."""

    name: str
    email: str
    id: Optional[int] = None
