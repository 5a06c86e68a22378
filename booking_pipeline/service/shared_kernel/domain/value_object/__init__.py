from booking_pipeline.service.shared_kernel.domain.value_object.decrement_result import (
    DecrementResult,
)
from booking_pipeline.service.shared_kernel.domain.value_object.inventory_snapshot import (
    InventorySnapshot,
)

__all__ = ['DecrementResult', 'InventorySnapshot']
