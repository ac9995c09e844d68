"""Tests for the dispatch service against an in-memory SQLite store."""

import time

import pytest

from dispatch.domain.enums import PlanStatus, Priority
from dispatch.domain.exceptions import (
    DuplicateIdsInRequest,
    DuplicateOrderError,
    DuplicateVehicleError,
    NoOrdersError,
    NoVehiclesError,
    OptimizationTimeout,
)
from dispatch.infrastructure.models import OrderModel, VehicleModel
from dispatch.services.dispatcher import DispatchService, to_order


def _order(order_id, weight=1000, priority=Priority.MEDIUM, lat=28.6, lng=77.2):
    return OrderModel(
        order_id=order_id,
        latitude=lat,
        longitude=lng,
        address="Connaught Place, New Delhi",
        package_weight=weight,
        priority=priority,
    )


def _vehicle(vehicle_id, capacity=10_000, lat=28.6, lng=77.2):
    return VehicleModel(
        vehicle_id=vehicle_id,
        capacity=capacity,
        current_latitude=lat,
        current_longitude=lng,
    )


class _SlowEngine:
    def optimize(self, orders, vehicles):
        time.sleep(0.5)


class TestSave:
    @pytest.mark.asyncio
    async def test_save_orders_message(self, db_session):
        service = DispatchService(db_session)
        message = await service.save_orders(
            [
                _order("ORD-1", priority=Priority.HIGH),
                _order("ORD-2", priority=Priority.HIGH),
                _order("ORD-3", priority=Priority.LOW),
            ]
        )
        assert message == (
            "Successfully saved 3 orders (2 HIGH, 0 MEDIUM, 1 LOW priority)"
        )
        assert await service.orders.count() == 3

    @pytest.mark.asyncio
    async def test_save_vehicles_message(self, db_session):
        service = DispatchService(db_session)
        message = await service.save_vehicles(
            [_vehicle("VEH-1", 10_000), _vehicle("VEH-2", 5_000)]
        )
        assert message == "Successfully saved 2 vehicles (Total capacity: 15000 grams)"

    @pytest.mark.asyncio
    async def test_duplicate_in_request(self, db_session):
        service = DispatchService(db_session)
        with pytest.raises(DuplicateIdsInRequest):
            await service.save_orders([_order("ORD-1"), _order("ORD-1")])
        with pytest.raises(DuplicateIdsInRequest):
            await service.save_vehicles([_vehicle("VEH-1"), _vehicle("VEH-1")])

    @pytest.mark.asyncio
    async def test_duplicate_against_store(self, db_session):
        service = DispatchService(db_session)
        await service.save_orders([_order("ORD-1")])
        await service.save_vehicles([_vehicle("VEH-1")])

        with pytest.raises(DuplicateOrderError) as exc_info:
            await service.save_orders([_order("ORD-2"), _order("ORD-1")])
        assert exc_info.value.order_id == "ORD-1"

        with pytest.raises(DuplicateVehicleError) as exc_info:
            await service.save_vehicles([_vehicle("VEH-1")])
        assert exc_info.value.vehicle_id == "VEH-1"


class TestPlan:
    @pytest.mark.asyncio
    async def test_no_orders(self, db_session):
        service = DispatchService(db_session)
        await service.save_vehicles([_vehicle("VEH-1")])
        with pytest.raises(NoOrdersError, match="No orders available"):
            await service.get_dispatch_plan()

    @pytest.mark.asyncio
    async def test_no_vehicles(self, db_session):
        service = DispatchService(db_session)
        await service.save_orders([_order("ORD-1")])
        with pytest.raises(NoVehiclesError, match="No vehicles available"):
            await service.get_dispatch_plan()

    @pytest.mark.asyncio
    async def test_plan_from_store(self, db_session):
        service = DispatchService(db_session)
        await service.save_orders(
            [
                _order("ORD-1", weight=3000, priority=Priority.LOW),
                _order("ORD-2", weight=5000, priority=Priority.HIGH),
            ]
        )
        await service.save_vehicles([_vehicle("VEH-1", 10_000)])

        plan = await service.get_dispatch_plan()

        assert plan.status == PlanStatus.SUCCESS
        vp = plan.dispatch_plan[0]
        assert vp.vehicle_id == "VEH-1"
        assert [o.order_id for o in vp.assigned_orders] == ["ORD-2", "ORD-1"]
        assert vp.utilization_percentage == 80.0

    @pytest.mark.asyncio
    async def test_ties_keep_submission_order(self, db_session):
        service = DispatchService(db_session)
        ids = ["ORD-C", "ORD-A", "ORD-B"]
        await service.save_orders([_order(i) for i in ids])
        await service.save_vehicles([_vehicle("VEH-1")])

        plan = await service.get_dispatch_plan()
        assert [o.order_id for o in plan.dispatch_plan[0].assigned_orders] == ids

    @pytest.mark.asyncio
    async def test_partial_when_fleet_too_small(self, db_session):
        service = DispatchService(db_session)
        await service.save_orders([_order("ORD-1", weight=50_000)])
        await service.save_vehicles([_vehicle("VEH-1"), _vehicle("VEH-2")])

        plan = await service.get_dispatch_plan()
        assert plan.status == PlanStatus.PARTIAL
        assert plan.summary.unassigned_orders == 1

    @pytest.mark.asyncio
    async def test_timeout(self, db_session):
        service = DispatchService(db_session, engine=_SlowEngine(), timeout_seconds=0.05)
        await service.save_orders([_order("ORD-1")])
        await service.save_vehicles([_vehicle("VEH-1")])

        with pytest.raises(OptimizationTimeout):
            await service.get_dispatch_plan()


class TestMaintenance:
    @pytest.mark.asyncio
    async def test_clear(self, db_session):
        service = DispatchService(db_session)
        await service.save_orders([_order("ORD-1"), _order("ORD-2")])
        await service.save_vehicles([_vehicle("VEH-1")])

        assert await service.clear_orders() == "Deleted 2 orders"
        assert await service.clear_vehicles() == "Deleted 1 vehicles"
        assert await service.list_orders() == []
        assert await service.list_vehicles() == []

    @pytest.mark.asyncio
    async def test_get_by_id(self, db_session):
        service = DispatchService(db_session)
        await service.save_orders([_order("ORD-1", priority=Priority.HIGH)])

        row = await service.orders.get_by_id("ORD-1")
        assert row is not None
        assert await service.orders.get_by_id("ORD-404") is None

        order = to_order(row)
        assert order.priority is Priority.HIGH
        assert order.location.latitude == 28.6
