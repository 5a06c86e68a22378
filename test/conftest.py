"""
Test Configuration and Fixtures

This module provides:
- Environment setup before any application module is imported
- In-memory adapters for every port (inventory store, order store, customers, publisher)
- An in-process inventory client that routes through DecrementInventoryUseCase,
  so pipeline tests exercise the real per-event lock and clamp-and-report logic

- PostgreSQL fixtures for test/**/integration/ (skipped when the server is unreachable)

Only integration tests need PostgreSQL; nothing needs Kafka or a running inventory service.
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings and the loguru sinks are built at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['POSTGRES_DB'] = 'booking_pipeline_test_db'
    os.environ.setdefault('ENABLE_KAFKA', 'false')
    os.environ.setdefault('KAFKA_BOOKING_TOPIC', 'booking')
    os.environ.setdefault('ORDER_CONSUMER_RETRY_BACKOFF_SECONDS', '0')


_early_setup_test_environment()

from decimal import Decimal  # noqa: E402
from typing import AsyncGenerator, Dict, List, Optional  # noqa: E402

import anyio  # noqa: E402
import attrs  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy import text  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402

from booking_pipeline.platform.config.core_setting import settings  # noqa: E402
from booking_pipeline.platform.database.orm_db_setting import (  # noqa: E402
    Base,
    Database,
    create_db_and_tables,
    dispose_engine,
    get_engine,
)
from booking_pipeline.platform.exception.exceptions import EventNotFound  # noqa: E402
from booking_pipeline.platform.state.keyed_lock import KeyedLock  # noqa: E402
from booking_pipeline.service.booking.app.interface.i_booking_event_publisher import (  # noqa: E402
    IBookingEventPublisher,
)
from booking_pipeline.service.booking.app.interface.i_customer_query_repo import (  # noqa: E402
    ICustomerQueryRepo,
)
from booking_pipeline.service.booking.domain.entity.customer_entity import Customer  # noqa: E402
from booking_pipeline.service.booking.driven_adapter.model import customer_model  # noqa: E402, F401
from booking_pipeline.service.inventory.app.command.decrement_inventory_use_case import (  # noqa: E402
    DecrementInventoryUseCase,
)
from booking_pipeline.service.inventory.app.interface.i_event_inventory_command_repo import (  # noqa: E402
    IEventInventoryCommandRepo,
)
from booking_pipeline.service.inventory.domain.entity.event_inventory_entity import (  # noqa: E402
    EventInventory,
)
from booking_pipeline.service.inventory.driven_adapter import model as inventory_model  # noqa: E402, F401
from booking_pipeline.service.order.app.interface.i_order_command_repo import (  # noqa: E402
    IOrderCommandRepo,
)
from booking_pipeline.service.order.domain.entity.order_entity import (  # noqa: E402
    Order,
    OrderStatus,
)
from booking_pipeline.service.order.driven_adapter.model import order_model  # noqa: E402, F401
from booking_pipeline.service.shared_kernel.app.interface.i_inventory_command_client import (  # noqa: E402
    IInventoryCommandClient,
)
from booking_pipeline.service.shared_kernel.app.interface.i_inventory_query_client import (  # noqa: E402
    IInventoryQueryClient,
)
from booking_pipeline.service.shared_kernel.domain.domain_event import (  # noqa: E402
    BookingPlacedEvent,
)
from booking_pipeline.service.shared_kernel.domain.value_object import (  # noqa: E402
    DecrementResult,
    InventorySnapshot,
)


DEFAULT_EVENT_ID = 1
DEFAULT_CUSTOMER_ID = 1
DEFAULT_CAPACITY = 10
DEFAULT_UNIT_PRICE = Decimal('20.00')


# =============================================================================
# In-memory adapters
# =============================================================================


class InMemoryEventInventoryCommandRepo(IEventInventoryCommandRepo):
    """
    Mirrors EventInventoryCommandRepoImpl: replay check, clamp-and-report, log row.

    Yields to the event loop between read and write so an unserialized caller
    would lose updates.
    """

    def __init__(self, events: Optional[Dict[int, EventInventory]] = None) -> None:
        self.events: Dict[int, EventInventory] = events or {}
        self.decrement_log: Dict[str, DecrementResult] = {}

    async def decrement(self, *, event_id: int, ticket_count: int, booking_id: str) -> DecrementResult:
        stored = self.events.get(event_id)
        if stored is None:
            raise EventNotFound(event_id)

        if booking_id in self.decrement_log:
            return attrs.evolve(self.decrement_log[booking_id], applied=False)

        entity = attrs.evolve(stored)
        await anyio.sleep(0)
        result = entity.decrement(ticket_count)
        await anyio.sleep(0)

        self.events[event_id] = entity
        self.decrement_log[booking_id] = result
        return result


class InProcessInventoryClient(IInventoryQueryClient, IInventoryCommandClient):
    """Inventory ports served in-process instead of over HTTP."""

    def __init__(self, *, repo: InMemoryEventInventoryCommandRepo, keyed_lock: KeyedLock) -> None:
        self.repo = repo
        self.decrement_use_case = DecrementInventoryUseCase(
            event_inventory_command_repo=repo, keyed_lock=keyed_lock
        )
        self.decrement_calls: List[str] = []

    async def read_capacity(self, *, event_id: int) -> InventorySnapshot:
        stored = self.repo.events.get(event_id)
        if stored is None:
            raise EventNotFound(event_id)
        return stored.to_snapshot()

    async def decrement(self, *, event_id: int, ticket_count: int, booking_id: str) -> DecrementResult:
        self.decrement_calls.append(booking_id)
        return await self.decrement_use_case.decrement(
            event_id=event_id, ticket_count=ticket_count, booking_id=booking_id
        )


class InMemoryOrderCommandRepo(IOrderCommandRepo):
    def __init__(self) -> None:
        self.orders: Dict[str, Order] = {}
        self._next_id = 1

    async def get_or_create_pending(self, *, order: Order) -> tuple[Order, bool]:
        existing = self.orders.get(order.booking_id)
        if existing is not None:
            return attrs.evolve(existing), False

        stored = attrs.evolve(order, id=self._next_id)
        self._next_id += 1
        self.orders[order.booking_id] = stored
        return attrs.evolve(stored), True

    async def save_status(self, *, order: Order) -> Order:
        stored = self.orders[order.booking_id]
        if stored.status == OrderStatus.PENDING_INVENTORY:
            stored = attrs.evolve(order)
            self.orders[order.booking_id] = stored
        return attrs.evolve(stored)


class InMemoryCustomerQueryRepo(ICustomerQueryRepo):
    def __init__(self, customers: Optional[Dict[int, Customer]] = None) -> None:
        self.customers: Dict[int, Customer] = customers or {}

    async def get_by_id(self, *, customer_id: int) -> Optional[Customer]:
        return self.customers.get(customer_id)


class RecordingEventPublisher(IBookingEventPublisher):
    """Stands in for the Kafka log: records are kept in publish order."""

    def __init__(self) -> None:
        self.published: List[BookingPlacedEvent] = []

    async def publish_booking_placed(self, *, event: BookingPlacedEvent) -> None:
        self.published.append(event)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def event_inventory() -> EventInventory:
    return EventInventory(
        id=DEFAULT_EVENT_ID,
        name='Opening Night',
        venue_id=1,
        total_capacity=DEFAULT_CAPACITY,
        remaining_capacity=DEFAULT_CAPACITY,
        ticket_price=DEFAULT_UNIT_PRICE,
    )


@pytest.fixture
def inventory_repo(event_inventory: EventInventory) -> InMemoryEventInventoryCommandRepo:
    return InMemoryEventInventoryCommandRepo({event_inventory.id: event_inventory})  # type: ignore[dict-item]


@pytest.fixture
def keyed_lock() -> KeyedLock:
    return KeyedLock()


@pytest.fixture
def inventory_client(
    inventory_repo: InMemoryEventInventoryCommandRepo, keyed_lock: KeyedLock
) -> InProcessInventoryClient:
    return InProcessInventoryClient(repo=inventory_repo, keyed_lock=keyed_lock)


@pytest.fixture
def order_repo() -> InMemoryOrderCommandRepo:
    return InMemoryOrderCommandRepo()


@pytest.fixture
def customer_repo() -> InMemoryCustomerQueryRepo:
    return InMemoryCustomerQueryRepo(
        {DEFAULT_CUSTOMER_ID: Customer(id=DEFAULT_CUSTOMER_ID, name='Ada', email='ada@example.com')}
    )


@pytest.fixture
def event_publisher() -> RecordingEventPublisher:
    return RecordingEventPublisher()


@pytest.fixture
def booking_record() -> BookingPlacedEvent:
    return BookingPlacedEvent.create(
        customer_id=DEFAULT_CUSTOMER_ID,
        event_id=DEFAULT_EVENT_ID,
        ticket_count=4,
        unit_price=DEFAULT_UNIT_PRICE,
    )


# =============================================================================
# PostgreSQL (integration tests)
# =============================================================================


def _get_server_url() -> str:
    return settings.DATABASE_URL_ASYNC.rsplit('/', 1)[0] + '/postgres'


async def _setup_test_database() -> None:
    """Create the test database if needed, then the schema from the models."""
    engine = create_async_engine(_get_server_url(), isolation_level='AUTOCOMMIT')
    try:
        async with engine.connect() as conn:
            exists = await conn.scalar(
                text('SELECT 1 FROM pg_database WHERE datname = :name'),
                {'name': settings.POSTGRES_DB},
            )
            if not exists:
                await conn.execute(text(f'CREATE DATABASE "{settings.POSTGRES_DB}"'))
    finally:
        await engine.dispose()

    await create_db_and_tables()


async def _clean_all_tables() -> None:
    quoted = ', '.join(f'"{table.name}"' for table in Base.metadata.sorted_tables)
    async with get_engine().begin() as conn:
        await conn.execute(text(f'TRUNCATE {quoted} RESTART IDENTITY CASCADE'))


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[Database, None]:
    try:
        await _setup_test_database()
    except Exception as e:
        await dispose_engine()
        pytest.skip(f'PostgreSQL not reachable at {settings.POSTGRES_SERVER}: {e}')

    await _clean_all_tables()
    yield Database()
    # Each test runs on its own event loop; drop pooled connections bound to this one
    await dispose_engine()
