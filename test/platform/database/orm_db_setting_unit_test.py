"""
Unit tests for Database.session error translation

The session maker is replaced by a stub so no database is needed; the stub's
execute() raises whatever the test wants the driver to raise.
"""

from typing import Optional

import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

from booking_pipeline.platform.database import orm_db_setting
from booking_pipeline.platform.database.orm_db_setting import Database
from booking_pipeline.platform.exception.exceptions import OrderNotFound, TransientStoreFailure
from booking_pipeline.service.order.domain.entity.order_entity import Order
from booking_pipeline.service.order.driven_adapter.repo.order_command_repo_impl import (
    OrderCommandRepoImpl,
)


REFUSED = OperationalError('SELECT 1', {}, ConnectionRefusedError('connection refused'))


class StubSession:
    def __init__(self, error: Optional[Exception]) -> None:
        self.error = error

    async def __aenter__(self) -> 'StubSession':
        return self

    async def __aexit__(self, *exc_info) -> bool:
        return False

    async def execute(self, statement):
        raise self.error


@pytest.fixture
def database_raising(monkeypatch):
    def _build(error: Optional[Exception]) -> Database:
        monkeypatch.setattr(orm_db_setting, 'get_session_maker', lambda: lambda: StubSession(error))
        return Database()

    return _build


@pytest.mark.unit
class TestDatabaseSession:
    @pytest.mark.asyncio
    async def test_refused_connection_becomes_transient_failure(self, database_raising) -> None:
        database = database_raising(REFUSED)

        with pytest.raises(TransientStoreFailure) as exc_info:
            async with database.session() as session:
                await session.execute('SELECT 1')

        assert exc_info.value.status_code == 503
        assert exc_info.value.__cause__ is REFUSED

    @pytest.mark.asyncio
    async def test_invalidated_connection_becomes_transient_failure(self, database_raising) -> None:
        dropped = DBAPIError('SELECT 1', {}, Exception('terminating connection'), connection_invalidated=True)
        database = database_raising(dropped)

        with pytest.raises(TransientStoreFailure):
            async with database.session() as session:
                await session.execute('SELECT 1')

    @pytest.mark.asyncio
    async def test_constraint_violation_is_not_translated(self, database_raising) -> None:
        duplicate = IntegrityError('INSERT', {}, Exception('duplicate key value'))
        database = database_raising(duplicate)

        with pytest.raises(IntegrityError):
            async with database.session() as session:
                await session.execute('INSERT')

    @pytest.mark.asyncio
    async def test_domain_errors_pass_through(self, database_raising) -> None:
        database = database_raising(None)

        with pytest.raises(OrderNotFound):
            async with database.session():
                raise OrderNotFound('b-1')

    @pytest.mark.asyncio
    async def test_order_repo_reports_outage_as_transient(
        self, database_raising, booking_record
    ) -> None:
        repo = OrderCommandRepoImpl(session_factory=database_raising(REFUSED).session)
        order = Order.create_pending(record=booking_record)

        with pytest.raises(TransientStoreFailure):
            await repo.get_or_create_pending(order=order)
