from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from booking_pipeline.platform.config.di import Container
from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.service.inventory.app.interface.i_event_inventory_query_repo import (
    IEventInventoryQueryRepo,
)
from booking_pipeline.service.inventory.domain.entity.event_inventory_entity import EventInventory


class ListEventInventoriesUseCase:
    def __init__(self, *, event_inventory_query_repo: IEventInventoryQueryRepo) -> None:
        self.event_inventory_query_repo = event_inventory_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        event_inventory_query_repo: IEventInventoryQueryRepo = Depends(
            Provide[Container.event_inventory_query_repo]
        ),
    ) -> Self:
        return cls(event_inventory_query_repo=event_inventory_query_repo)

    @Logger.io
    async def list_all(self) -> List[EventInventory]:
        return await self.event_inventory_query_repo.list_all()
