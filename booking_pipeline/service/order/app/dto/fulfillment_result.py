from enum import StrEnum
from typing import Optional

import attrs

from booking_pipeline.service.order.domain.entity.order_entity import Order
from booking_pipeline.service.shared_kernel.domain.value_object import DecrementResult


class FulfillmentOutcome(StrEnum):
    FULFILLED = 'fulfilled'
    RECONCILIATION = 'reconciliation'
    DUPLICATE = 'duplicate'  # redelivered record absorbed, nothing applied


@attrs.define(frozen=True)
class FulfillmentResult:
    outcome: FulfillmentOutcome
    order: Order
    decrement: Optional[DecrementResult] = None
