"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from booking_pipeline.platform.config.core_setting import Settings
from booking_pipeline.platform.database.orm_db_setting import Database
from booking_pipeline.platform.state.keyed_lock import KeyedLock
from booking_pipeline.service.booking.driven_adapter.message_queue.booking_event_publisher_impl import (
    BookingEventPublisherImpl,
)
from booking_pipeline.service.booking.driven_adapter.repo.customer_query_repo_impl import (
    CustomerQueryRepoImpl,
)
from booking_pipeline.service.inventory.driven_adapter.repo.event_inventory_command_repo_impl import (
    EventInventoryCommandRepoImpl,
)
from booking_pipeline.service.inventory.driven_adapter.repo.event_inventory_query_repo_impl import (
    EventInventoryQueryRepoImpl,
)
from booking_pipeline.service.inventory.driven_adapter.repo.venue_query_repo_impl import (
    VenueQueryRepoImpl,
)
from booking_pipeline.service.order.app.command.fulfill_booking_use_case import (
    FulfillBookingUseCase,
)
from booking_pipeline.service.order.driven_adapter.repo.order_command_repo_impl import (
    OrderCommandRepoImpl,
)
from booking_pipeline.service.order.driven_adapter.repo.order_query_repo_impl import (
    OrderQueryRepoImpl,
)
from booking_pipeline.service.shared_kernel.driven_adapter.inventory_http_client import (
    InventoryHttpClient,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (uses AsyncEngineManager with settings from config_service)
    database = providers.Singleton(Database)

    # ====== Inventory Service =======
    # One lock table per process: decrements of the same event never interleave
    inventory_keyed_lock = providers.Singleton(KeyedLock)
    event_inventory_command_repo = providers.Singleton(
        EventInventoryCommandRepoImpl, session_factory=database.provided.session
    )
    event_inventory_query_repo = providers.Singleton(
        EventInventoryQueryRepoImpl, session_factory=database.provided.session
    )
    venue_query_repo = providers.Singleton(
        VenueQueryRepoImpl, session_factory=database.provided.session
    )

    # ====== Inventory HTTP client (booking admission read + order decrement) =======
    inventory_client = providers.Singleton(InventoryHttpClient)

    # ====== Booking Service =======
    customer_query_repo = providers.Singleton(
        CustomerQueryRepoImpl, session_factory=database.provided.session
    )
    booking_event_publisher = providers.Singleton(BookingEventPublisherImpl)

    # ====== Order Service =======
    order_command_repo = providers.Singleton(
        OrderCommandRepoImpl, session_factory=database.provided.session
    )
    order_query_repo = providers.Singleton(
        OrderQueryRepoImpl, session_factory=database.provided.session
    )

    # Consumer-side use case (stateless, can be Singleton)
    fulfill_booking_use_case = providers.Singleton(
        FulfillBookingUseCase,
        order_command_repo=order_command_repo,
        inventory_client=inventory_client,
    )


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
