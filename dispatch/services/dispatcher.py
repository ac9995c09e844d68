"""
Dispatch Service
================

Glue between persistence and the optimization engine.

* ``save_orders`` / ``save_vehicles`` -- reject duplicate ids (inside the
  batch and against the store) and persist the batch.
* ``get_dispatch_plan`` -- load every stored order and vehicle, convert the
  ORM rows into immutable domain entities and run the greedy optimizer.

The optimizer is CPU-bound and synchronous, so it runs in a worker thread
under ``asyncio.wait_for``; the timeout belongs to this layer, not to the
engine.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from dispatch.config import settings
from dispatch.domain.entities import DispatchPlan, Location, Order, Vehicle
from dispatch.domain.enums import Priority
from dispatch.domain.exceptions import (
    DuplicateIdsInRequest,
    DuplicateOrderError,
    DuplicateVehicleError,
    NoOrdersError,
    NoVehiclesError,
    OptimizationTimeout,
)
from dispatch.domain.optimizer import OptimizationEngine
from dispatch.infrastructure.models import OrderModel, VehicleModel
from dispatch.infrastructure.repositories import OrderRepository, VehicleRepository

logger = logging.getLogger(__name__)


# ── ORM -> domain ─────────────────────────────────────────────────────


def to_order(model: OrderModel) -> Order:
    return Order(
        order_id=model.order_id,
        location=Location(model.latitude, model.longitude),
        package_weight=model.package_weight,
        priority=Priority(model.priority),
        address=model.address,
    )


def to_vehicle(model: VehicleModel) -> Vehicle:
    return Vehicle(
        vehicle_id=model.vehicle_id,
        capacity=model.capacity,
        location=Location(model.current_latitude, model.current_longitude),
        current_address=model.current_address,
    )


def _first_duplicate(ids: Iterable[str]) -> Optional[str]:
    seen: set[str] = set()
    for i in ids:
        if i in seen:
            return i
        seen.add(i)
    return None


# ── Service ───────────────────────────────────────────────────────────


class DispatchService:
    def __init__(
        self,
        session: AsyncSession,
        engine: Optional[OptimizationEngine] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.orders = OrderRepository(session)
        self.vehicles = VehicleRepository(session)
        self.engine = engine or OptimizationEngine()
        self.timeout_seconds = (
            timeout_seconds
            if timeout_seconds is not None
            else settings.optimization_timeout_seconds
        )

    async def save_orders(self, orders: list[OrderModel]) -> str:
        """Persist a batch of orders.  Returns a human-readable summary."""
        logger.info("Saving %d orders", len(orders))

        dup = _first_duplicate(o.order_id for o in orders)
        if dup is not None:
            logger.error("Duplicate order ID %s found in request", dup)
            raise DuplicateIdsInRequest("Request contains duplicate order IDs")

        existing = await self.orders.existing_ids(o.order_id for o in orders)
        for order in orders:
            if order.order_id in existing:
                logger.error("Duplicate order ID detected: %s", order.order_id)
                raise DuplicateOrderError(order.order_id)

        saved = await self.orders.add_all(orders)
        counts = Counter(Priority(o.priority) for o in saved)
        logger.info("Successfully saved %d orders", len(saved))
        return (
            f"Successfully saved {len(saved)} orders "
            f"({counts[Priority.HIGH]} HIGH, {counts[Priority.MEDIUM]} MEDIUM, "
            f"{counts[Priority.LOW]} LOW priority)"
        )

    async def save_vehicles(self, vehicles: list[VehicleModel]) -> str:
        logger.info("Saving %d vehicles", len(vehicles))

        dup = _first_duplicate(v.vehicle_id for v in vehicles)
        if dup is not None:
            logger.error("Duplicate vehicle ID %s found in request", dup)
            raise DuplicateIdsInRequest("Request contains duplicate vehicle IDs")

        existing = await self.vehicles.existing_ids(v.vehicle_id for v in vehicles)
        for vehicle in vehicles:
            if vehicle.vehicle_id in existing:
                logger.error("Duplicate vehicle ID detected: %s", vehicle.vehicle_id)
                raise DuplicateVehicleError(vehicle.vehicle_id)

        saved = await self.vehicles.add_all(vehicles)
        total_capacity = sum(v.capacity for v in saved)
        logger.info("Successfully saved %d vehicles", len(saved))
        return (
            f"Successfully saved {len(saved)} vehicles "
            f"(Total capacity: {total_capacity} grams)"
        )

    async def get_dispatch_plan(self) -> DispatchPlan:
        """Load the current snapshot and run the optimizer on it."""
        logger.info("Generating dispatch plan...")

        order_rows = await self.orders.get_all()
        if not order_rows:
            logger.error("No orders found in database")
            raise NoOrdersError()
        vehicle_rows = await self.vehicles.get_all()
        if not vehicle_rows:
            logger.error("No vehicles found in database")
            raise NoVehiclesError()

        orders = [to_order(m) for m in order_rows]
        vehicles = [to_vehicle(m) for m in vehicle_rows]
        logger.info("Fetched %d orders and %d vehicles", len(orders), len(vehicles))
        self._check_total_capacity(orders, vehicles)

        try:
            plan = await asyncio.wait_for(
                asyncio.to_thread(self.engine.optimize, orders, vehicles),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            logger.error(
                "Optimization exceeded %.1fs for %d orders / %d vehicles",
                self.timeout_seconds,
                len(orders),
                len(vehicles),
            )
            raise OptimizationTimeout(self.timeout_seconds) from exc

        logger.info(
            "Dispatch plan generated: %d vehicles used, %d/%d orders assigned",
            plan.summary.used_vehicles,
            plan.summary.assigned_orders,
            plan.summary.total_orders,
        )
        return plan

    async def list_orders(self) -> list[OrderModel]:
        return await self.orders.get_all()

    async def list_vehicles(self) -> list[VehicleModel]:
        return await self.vehicles.get_all()

    async def clear_orders(self) -> str:
        deleted = await self.orders.delete_all()
        logger.warning("Deleted all %d orders", deleted)
        return f"Deleted {deleted} orders"

    async def clear_vehicles(self) -> str:
        deleted = await self.vehicles.delete_all()
        logger.warning("Deleted all %d vehicles", deleted)
        return f"Deleted {deleted} vehicles"

    @staticmethod
    def _check_total_capacity(
        orders: list[Order], vehicles: list[Vehicle]
    ) -> None:
        total_weight = sum(o.package_weight for o in orders)
        total_capacity = sum(v.capacity for v in vehicles)
        logger.info(
            "Capacity check: orders = %d grams, fleet = %d grams",
            total_weight,
            total_capacity,
        )
        if total_weight > total_capacity:
            logger.warning(
                "Total order weight (%d g) exceeds total fleet capacity (%d g); "
                "some orders may not be assigned",
                total_weight,
                total_capacity,
            )
