#!/usr/bin/env python3
"""
Database Seed Script
Populate demo data into the database

Features:
1. Create Customers - 3 customers who can submit bookings
2. Create Venues - 2 venues
3. Create Events - events with a fixed capacity and ticket price

Notes:
- Run the inventory service against the same database to serve these events
- EVENT_CAPACITY overrides the capacity of the demo events (default 10)
"""

import asyncio
from dataclasses import dataclass
from decimal import Decimal
import os

from sqlalchemy import select

from booking_pipeline.platform.database.orm_db_setting import (
    create_db_and_tables,
    dispose_engine,
    get_session_maker,
)
from booking_pipeline.service.booking.driven_adapter.model.customer_model import CustomerModel
from booking_pipeline.service.inventory.driven_adapter.model import (
    EventInventoryModel,
    VenueModel,
)


@dataclass
class CustomerConfig:
    name: str
    email: str


@dataclass
class EventConfig:
    name: str
    venue_name: str
    ticket_price: Decimal


TEST_CUSTOMERS = [
    CustomerConfig(name='Ada Lovelace', email='ada@example.com'),
    CustomerConfig(name='Alan Turing', email='alan@example.com'),
    CustomerConfig(name='Load Test Customer', email='load@example.com'),
]

TEST_VENUES = {
    'Main Hall': ('1 Concert Street', 500),
    'Jazz Club': ('42 Blue Note Avenue', 120),
}

TEST_EVENTS = [
    EventConfig(name='Opening Night', venue_name='Main Hall', ticket_price=Decimal('20.00')),
    EventConfig(name='Late Session', venue_name='Jazz Club', ticket_price=Decimal('35.50')),
]


async def create_customers(session) -> int:
    print(f'👥 Creating {len(TEST_CUSTOMERS)} customers...')
    created = 0

    for config in TEST_CUSTOMERS:
        existing = await session.scalar(
            select(CustomerModel).where(CustomerModel.email == config.email)
        )
        if existing:
            print(f'   ⏭️  {config.email} already exists (id={existing.id})')
            continue

        customer = CustomerModel(name=config.name, email=config.email)
        session.add(customer)
        await session.flush()
        print(f'   ✅ {config.email} (id={customer.id})')
        created += 1

    return created


async def create_venues(session) -> dict[str, int]:
    print(f'🏟️  Creating {len(TEST_VENUES)} venues...')
    venue_ids: dict[str, int] = {}

    for name, (address, total_capacity) in TEST_VENUES.items():
        venue = await session.scalar(select(VenueModel).where(VenueModel.name == name))
        if venue is None:
            venue = VenueModel(name=name, address=address, total_capacity=total_capacity)
            session.add(venue)
            await session.flush()
            print(f'   ✅ {name} (id={venue.id})')
        venue_ids[name] = venue.id

    return venue_ids


async def create_events(session, venue_ids: dict[str, int]) -> None:
    capacity = int(os.getenv('EVENT_CAPACITY', '10'))
    print(f'🎫 Creating {len(TEST_EVENTS)} events (capacity={capacity})...')

    for config in TEST_EVENTS:
        event = EventInventoryModel(
            name=config.name,
            venue_id=venue_ids[config.venue_name],
            total_capacity=capacity,
            remaining_capacity=capacity,
            ticket_price=config.ticket_price,
        )
        session.add(event)
        await session.flush()
        print(f'   ✅ {config.name} (id={event.id}, price={config.ticket_price})')


async def main():
    print('🌱 Starting data seeding...')
    print('=' * 50)

    try:
        await create_db_and_tables()

        async with get_session_maker()() as session:
            await create_customers(session)
            venue_ids = await create_venues(session)
            await create_events(session, venue_ids)
            await session.commit()

        print('=' * 50)
        print('✅ Data seeding completed!')

    except Exception as e:
        print(f'❌ Seeding failed: {e}')
        exit(1)
    finally:
        await dispose_engine()


if __name__ == '__main__':
    asyncio.run(main())
