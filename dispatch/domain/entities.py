"""
Domain entities for dispatch planning.

Patterns used
-------------
- ``Order`` and ``Vehicle`` are immutable snapshots handed to the engine.
- ``VehicleAssignmentState`` is the per-run accumulator for one vehicle;
  ``can_accommodate`` / ``add_order`` encapsulate the capacity invariant.
- ``DispatchPlan`` and its parts are frozen value objects built once at
  the end of a run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .enums import PlanStatus, Priority


class CapacityExceeded(Exception):
    """Raised when an order is added to a vehicle that cannot carry it."""


# ── Value Object ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float


# ── Inputs ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Order:
    order_id: str
    location: Location
    package_weight: int
    priority: Priority
    address: Optional[str] = None


@dataclass(frozen=True)
class Vehicle:
    vehicle_id: str
    capacity: int
    location: Location
    current_address: Optional[str] = None


# ── Per-run state ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class AssignmentRecord:
    order: Order
    distance_km: float


@dataclass
class VehicleAssignmentState:
    vehicle: Vehicle
    current_load: int = 0
    total_distance: float = 0.0
    assignments: list[AssignmentRecord] = field(default_factory=list)

    @property
    def remaining_capacity(self) -> int:
        return self.vehicle.capacity - self.current_load

    def can_accommodate(self, weight: int) -> bool:
        return self.remaining_capacity >= weight

    def add_order(self, order: Order, distance_km: float) -> None:
        if not self.can_accommodate(order.package_weight):
            raise CapacityExceeded(
                f"Vehicle {self.vehicle.vehicle_id} cannot carry order "
                f"{order.order_id}: {order.package_weight} g requested, "
                f"{self.remaining_capacity} g remaining"
            )
        self.assignments.append(AssignmentRecord(order, distance_km))
        self.current_load += order.package_weight
        self.total_distance += distance_km

    @property
    def utilization(self) -> float:
        """Load as a percentage of capacity (unrounded)."""
        return self.current_load * 100.0 / self.vehicle.capacity


# ── Output ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class AssignedOrder:
    order_id: str
    address: Optional[str]
    package_weight: int
    priority: Priority
    distance_from_vehicle: str


@dataclass(frozen=True)
class VehiclePlan:
    vehicle_id: str
    total_load: int
    total_distance: str
    assigned_orders: tuple[AssignedOrder, ...]
    order_count: int
    utilization_percentage: float


@dataclass(frozen=True)
class PlanSummary:
    total_orders: int = 0
    assigned_orders: int = 0
    unassigned_orders: int = 0
    total_vehicles: int = 0
    used_vehicles: int = 0
    total_distance_covered: str = "0.00 km"
    average_utilization: float = 0.0


@dataclass(frozen=True)
class DispatchPlan:
    status: PlanStatus
    message: str
    dispatch_plan: tuple[VehiclePlan, ...] = ()
    summary: PlanSummary = field(default_factory=PlanSummary)
    unassigned_order_ids: tuple[str, ...] = ()
