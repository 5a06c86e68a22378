from typing import AsyncContextManager, Callable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.service.booking.app.interface.i_customer_query_repo import ICustomerQueryRepo
from booking_pipeline.service.booking.domain.entity.customer_entity import Customer
from booking_pipeline.service.booking.driven_adapter.model.customer_model import CustomerModel


class CustomerQueryRepoImpl(ICustomerQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def get_by_id(self, *, customer_id: int) -> Optional[Customer]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(CustomerModel).where(CustomerModel.id == customer_id)
            )
            customer_model = result.scalar_one_or_none()

            if not customer_model:
                return None

            return Customer(
                id=customer_model.id,
                name=customer_model.name,
                email=customer_model.email,
            )
