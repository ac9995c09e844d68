"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 8 delivery orders around central Delhi (mixed priorities and weights)
  - 3 vehicles with different capacities
"""

import asyncio

from sqlalchemy import text

from dispatch.domain.enums import Priority
from dispatch.infrastructure.database import async_session_factory, engine
from dispatch.infrastructure.models import OrderModel, VehicleModel


ORDERS = [
    {"order_id": "ORD-001", "lat": 28.6139, "lng": 77.2090, "address": "Connaught Place, New Delhi", "weight": 5000, "priority": Priority.HIGH},
    {"order_id": "ORD-002", "lat": 28.5355, "lng": 77.3910, "address": "Sector 18, Noida, Uttar Pradesh", "weight": 3000, "priority": Priority.MEDIUM},
    {"order_id": "ORD-003", "lat": 28.4595, "lng": 77.0266, "address": "Cyber City, Gurugram, Haryana", "weight": 8000, "priority": Priority.HIGH},
    {"order_id": "ORD-004", "lat": 28.7041, "lng": 77.1025, "address": "Pitampura, North West Delhi", "weight": 2000, "priority": Priority.LOW},
    {"order_id": "ORD-005", "lat": 28.5245, "lng": 77.1855, "address": "Saket District Centre, New Delhi", "weight": 4500, "priority": Priority.MEDIUM},
    {"order_id": "ORD-006", "lat": 28.6692, "lng": 77.4538, "address": "Raj Nagar, Ghaziabad, Uttar Pradesh", "weight": 6000, "priority": Priority.LOW},
    {"order_id": "ORD-007", "lat": 28.6304, "lng": 77.2177, "address": "Janpath Market, New Delhi", "weight": 1500, "priority": Priority.HIGH},
    {"order_id": "ORD-008", "lat": 28.5677, "lng": 77.3211, "address": "Mayur Vihar Phase 1, East Delhi", "weight": 7000, "priority": Priority.MEDIUM},
]

VEHICLES = [
    {"vehicle_id": "VEH-001", "capacity": 15000, "lat": 28.6200, "lng": 77.2100, "address": "Central Depot, Karol Bagh, New Delhi"},
    {"vehicle_id": "VEH-002", "capacity": 10000, "lat": 28.5000, "lng": 77.1000, "address": "South Hub, Vasant Kunj, New Delhi"},
    {"vehicle_id": "VEH-003", "capacity": 12000, "lat": 28.6000, "lng": 77.3500, "address": "East Hub, Sector 62, Noida"},
]


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM delivery_orders"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        # ── Orders ────────────────────────────────────────────────────
        for o in ORDERS:
            session.add(
                OrderModel(
                    order_id=o["order_id"],
                    latitude=o["lat"],
                    longitude=o["lng"],
                    address=o["address"],
                    package_weight=o["weight"],
                    priority=o["priority"],
                )
            )
        await session.flush()
        print(f"  Created {len(ORDERS)} orders")

        # ── Vehicles ──────────────────────────────────────────────────
        for v in VEHICLES:
            session.add(
                VehicleModel(
                    vehicle_id=v["vehicle_id"],
                    capacity=v["capacity"],
                    current_latitude=v["lat"],
                    current_longitude=v["lng"],
                    current_address=v["address"],
                )
            )
        await session.flush()
        print(f"  Created {len(VEHICLES)} vehicles")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
