"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.
"""

from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import OrderModel, VehicleModel


class OrderRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_all(self, orders: list[OrderModel]) -> list[OrderModel]:
        self.session.add_all(orders)
        await self.session.flush()
        return orders

    async def get_by_id(self, order_id: str) -> Optional[OrderModel]:
        result = await self.session.execute(
            select(OrderModel).where(OrderModel.order_id == order_id)
        )
        return result.scalar_one_or_none()

    async def existing_ids(self, order_ids: Iterable[str]) -> set[str]:
        """Return the subset of *order_ids* already stored."""
        ids = list(order_ids)
        if not ids:
            return set()
        result = await self.session.execute(
            select(OrderModel.order_id).where(OrderModel.order_id.in_(ids))
        )
        return set(result.scalars().all())

    async def get_all(self) -> list[OrderModel]:
        result = await self.session.execute(
            select(OrderModel).order_by(OrderModel.id)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(OrderModel)
        )
        return result.scalar() or 0

    async def delete_all(self) -> int:
        total = await self.count()
        await self.session.execute(delete(OrderModel))
        return total


class VehicleRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_all(self, vehicles: list[VehicleModel]) -> list[VehicleModel]:
        self.session.add_all(vehicles)
        await self.session.flush()
        return vehicles

    async def get_by_id(self, vehicle_id: str) -> Optional[VehicleModel]:
        result = await self.session.execute(
            select(VehicleModel).where(VehicleModel.vehicle_id == vehicle_id)
        )
        return result.scalar_one_or_none()

    async def existing_ids(self, vehicle_ids: Iterable[str]) -> set[str]:
        ids = list(vehicle_ids)
        if not ids:
            return set()
        result = await self.session.execute(
            select(VehicleModel.vehicle_id).where(VehicleModel.vehicle_id.in_(ids))
        )
        return set(result.scalars().all())

    async def get_all(self) -> list[VehicleModel]:
        result = await self.session.execute(
            select(VehicleModel).order_by(VehicleModel.id)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(VehicleModel)
        )
        return result.scalar() or 0

    async def delete_all(self) -> int:
        total = await self.count()
        await self.session.execute(delete(VehicleModel))
        return total
