from booking_pipeline.service.inventory.driven_adapter.model.event_inventory_model import (
    EventInventoryModel,
)
from booking_pipeline.service.inventory.driven_adapter.model.inventory_decrement_log_model import (
    InventoryDecrementLogModel,
)
from booking_pipeline.service.inventory.driven_adapter.model.venue_model import VenueModel

__all__ = ['EventInventoryModel', 'InventoryDecrementLogModel', 'VenueModel']
