#!/usr/bin/env python3
"""
Database Reset Script
Drop and recreate every table of the booking pipeline

Notes:
- This script only resets database structure, does not seed demo data
- To seed demo data, run `python script/seed_data.py`
"""

import asyncio

from booking_pipeline.platform.config.core_setting import settings
from booking_pipeline.platform.database.orm_db_setting import Base, dispose_engine, get_engine

# Registers every model on Base.metadata
from booking_pipeline.service.booking.driven_adapter.model import customer_model  # noqa: F401
from booking_pipeline.service.inventory.driven_adapter import model as inventory_model  # noqa: F401
from booking_pipeline.service.order.driven_adapter.model import order_model  # noqa: F401


async def drop_and_recreate_tables():
    print(f'Database: {settings.POSTGRES_SERVER}:{settings.POSTGRES_PORT}/{settings.POSTGRES_DB}')

    async with get_engine().begin() as conn:
        print('🗑️ Dropping tables...')
        await conn.run_sync(Base.metadata.drop_all)
        print('🏗️ Creating tables...')
        await conn.run_sync(Base.metadata.create_all)

    print(f'   ✅ {len(Base.metadata.tables)} tables recreated')


async def main():
    print('🔄 Starting database reset...')
    print('=' * 50)

    try:
        await drop_and_recreate_tables()
        print('=' * 50)
        print('✅ Database reset completed!')
        print('💡 To seed demo data, run: python script/seed_data.py')

    except Exception as e:
        print(f'❌ Reset failed: {e}')
        exit(1)
    finally:
        await dispose_engine()


if __name__ == '__main__':
    asyncio.run(main())
