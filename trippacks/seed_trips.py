"""
Database seeding script for demo trip packs.

Creates a few trips with stops so the list has something to show.
Safe to run repeatedly: each run adds trips numbered after the last one.
"""

import asyncio
import random
import sys
from datetime import date
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from trippacks.app.db.session import AsyncSessionLocal, engine
from trippacks.app.db.schema import initialize_schema
from trippacks.app.services.record_repository import RecordRepository
from trippacks.app.services.trip_builder import TripPackBuilder

DEMO_TRIPS = 3
MAX_STOPS = 5


async def seed_trips(count: int = DEMO_TRIPS):
    """
    Seed ``count`` trip packs, each with 2 to MAX_STOPS stops.
    """
    async with engine.begin() as conn:
        await conn.run_sync(initialize_schema)

    builder = TripPackBuilder(RecordRepository(AsyncSessionLocal))
    today = date.today().isoformat()

    print("🌱 Starting trip seeding...")
    for _ in range(count):
        stop_count = random.randint(2, MAX_STOPS)
        locations = [f"Location {index}" for index in range(1, stop_count + 1)]
        pack = await builder.create(locations, received_date=today)
        if pack.complete:
            print(f"✅ Trip {pack.trip_number} added: {pack.from_to}")
        else:
            print(f"⚠️  Trip {pack.trip_number} only partly written")

    await engine.dispose()
    print("\n🎉 Trip seeding completed!")


if __name__ == "__main__":
    asyncio.run(seed_trips())
