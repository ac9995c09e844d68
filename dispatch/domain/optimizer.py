"""
Greedy Dispatch Optimization
============================

1. **Ordering**         -- Orders are stably sorted by priority (HIGH first)
   and then by package weight (heavier first), so large parcels claim
   capacity before it fragments.
2. **Distance Matrix**  -- Every (vehicle, order) Haversine distance is
   computed once up front and cached for the run.
3. **Greedy Assignment** -- Each order, in sorted order, goes to the nearest
   vehicle that still has room for it.  Orders that fit nowhere stay
   unassigned and are reported in the summary.

Complexity
----------
Let O = number of orders, V = number of vehicles.

* Sorting:          O(O log O)
* Distance matrix:  O(V x O)      -- one Haversine call per pair
* Assignment:       O(V x O)      -- each order scans every vehicle
* Overall:          O(V x O + O log O)

**Note:** The greedy heuristic does NOT guarantee a globally minimal total
distance or a maximal fill rate.  Each order commits to its locally best
vehicle and earlier choices are never revisited.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from .distance import format_km, haversine_km
from .entities import (
    AssignedOrder,
    DispatchPlan,
    Order,
    PlanSummary,
    Vehicle,
    VehicleAssignmentState,
    VehiclePlan,
)
from .enums import PlanStatus, Priority

logger = logging.getLogger(__name__)

NO_ORDERS_MESSAGE = "No orders to assign"
NO_VEHICLES_MESSAGE = "No vehicles available"
SUCCESS_MESSAGE = "Dispatch plan generated successfully"

DistanceMatrix = dict[tuple[str, str], float]


def sort_orders(orders: Sequence[Order]) -> list[Order]:
    """Priority descending, then weight descending.  Stable for ties."""
    return sorted(
        orders,
        key=lambda o: (-o.priority.sort_order, -o.package_weight),
    )


def build_distance_matrix(
    vehicles: Sequence[Vehicle], orders: Sequence[Order]
) -> DistanceMatrix:
    """Precompute the vehicle-to-order distance for every pair.  O(V x O)."""
    matrix: DistanceMatrix = {}
    for vehicle in vehicles:
        for order in orders:
            matrix[(vehicle.vehicle_id, order.order_id)] = haversine_km(
                vehicle.location.latitude,
                vehicle.location.longitude,
                order.location.latitude,
                order.location.longitude,
            )
    return matrix


def find_best_vehicle(
    order: Order,
    states: Sequence[VehicleAssignmentState],
    matrix: DistanceMatrix,
) -> Optional[tuple[VehicleAssignmentState, float]]:
    """
    Return the nearest state that can still carry *order*, with its distance.

    Ties go to the vehicle encountered first (strict ``<``).
    Complexity: O(V).
    """
    best: Optional[VehicleAssignmentState] = None
    best_distance = float("inf")

    for state in states:
        if not state.can_accommodate(order.package_weight):
            continue
        distance = matrix[(state.vehicle.vehicle_id, order.order_id)]
        if distance < best_distance:
            best, best_distance = state, distance

    if best is None:
        return None
    return best, best_distance


def round_percentage(value: float) -> float:
    """Two decimal places, halves rounded up after scaling by 100."""
    return math.floor(value * 100.0 + 0.5) / 100.0


def _count_by_priority(orders: Sequence[Order], priority: Priority) -> int:
    return sum(1 for o in orders if o.priority == priority)


class OptimizationEngine:
    """
    Stateless facade over the greedy dispatch algorithm.

    A single instance may be shared between callers: every call to
    :meth:`optimize` builds its own distance matrix and vehicle states.
    """

    def optimize(
        self, orders: Sequence[Order], vehicles: Sequence[Vehicle]
    ) -> DispatchPlan:
        logger.info(
            "Starting dispatch optimization: %d orders, %d vehicles",
            len(orders),
            len(vehicles),
        )

        if not orders:
            logger.warning(NO_ORDERS_MESSAGE)
            return self._empty_plan(NO_ORDERS_MESSAGE)
        if not vehicles:
            logger.error("No vehicles available for assignment")
            return self._empty_plan(NO_VEHICLES_MESSAGE)

        sorted_orders = sort_orders(orders)
        logger.info(
            "Orders sorted: %d HIGH, %d MEDIUM, %d LOW priority",
            _count_by_priority(sorted_orders, Priority.HIGH),
            _count_by_priority(sorted_orders, Priority.MEDIUM),
            _count_by_priority(sorted_orders, Priority.LOW),
        )

        states = [VehicleAssignmentState(vehicle=v) for v in vehicles]

        matrix = build_distance_matrix(vehicles, sorted_orders)
        logger.info("Distance matrix built: %d entries cached", len(matrix))

        unassigned = self._assign(sorted_orders, states, matrix)
        plan = self._build_plan(states, len(sorted_orders), unassigned)

        logger.info(
            "Optimization complete: %d/%d orders assigned, %d vehicles used",
            plan.summary.assigned_orders,
            plan.summary.total_orders,
            plan.summary.used_vehicles,
        )
        return plan

    # ── Internals ─────────────────────────────────────────────────────

    @staticmethod
    def _assign(
        sorted_orders: Sequence[Order],
        states: Sequence[VehicleAssignmentState],
        matrix: DistanceMatrix,
    ) -> list[str]:
        """Run the greedy pass.  Returns ids of orders that fit nowhere."""
        unassigned: list[str] = []

        for order in sorted_orders:
            best = find_best_vehicle(order, states, matrix)
            if best is None:
                unassigned.append(order.order_id)
                logger.warning(
                    "Cannot assign order %s: %s priority, %d grams - "
                    "no vehicle with sufficient capacity",
                    order.order_id,
                    order.priority.value,
                    order.package_weight,
                )
                continue

            state, distance = best
            state.add_order(order, distance)
            logger.debug(
                "Assigned order %s to vehicle %s (distance: %.2f km, "
                "load: %d/%d grams)",
                order.order_id,
                state.vehicle.vehicle_id,
                distance,
                state.current_load,
                state.vehicle.capacity,
            )

        logger.info(
            "Assignment complete: %d assigned, %d unassigned",
            len(sorted_orders) - len(unassigned),
            len(unassigned),
        )
        return unassigned

    @staticmethod
    def _build_plan(
        states: Sequence[VehicleAssignmentState],
        total_orders: int,
        unassigned: list[str],
    ) -> DispatchPlan:
        vehicle_plans: list[VehiclePlan] = []
        assigned_orders = 0
        total_distance = 0.0
        total_utilization = 0.0

        for state in states:
            if not state.assignments:
                continue

            utilization = state.utilization
            assigned_orders += len(state.assignments)
            total_distance += state.total_distance
            total_utilization += utilization

            vehicle_plans.append(
                VehiclePlan(
                    vehicle_id=state.vehicle.vehicle_id,
                    total_load=state.current_load,
                    total_distance=format_km(state.total_distance),
                    assigned_orders=tuple(
                        AssignedOrder(
                            order_id=rec.order.order_id,
                            address=rec.order.address,
                            package_weight=rec.order.package_weight,
                            priority=rec.order.priority,
                            distance_from_vehicle=format_km(rec.distance_km),
                        )
                        for rec in state.assignments
                    ),
                    order_count=len(state.assignments),
                    utilization_percentage=round_percentage(utilization),
                )
            )

        used_vehicles = len(vehicle_plans)
        average_utilization = (
            round_percentage(total_utilization / used_vehicles)
            if used_vehicles
            else 0.0
        )

        summary = PlanSummary(
            total_orders=total_orders,
            assigned_orders=assigned_orders,
            unassigned_orders=total_orders - assigned_orders,
            total_vehicles=len(states),
            used_vehicles=used_vehicles,
            total_distance_covered=format_km(total_distance),
            average_utilization=average_utilization,
        )
        status = (
            PlanStatus.SUCCESS
            if assigned_orders == total_orders
            else PlanStatus.PARTIAL
        )
        return DispatchPlan(
            status=status,
            message=SUCCESS_MESSAGE,
            dispatch_plan=tuple(vehicle_plans),
            summary=summary,
            unassigned_order_ids=tuple(unassigned),
        )

    @staticmethod
    def _empty_plan(message: str) -> DispatchPlan:
        return DispatchPlan(
            status=PlanStatus.FAILED,
            message=message,
            dispatch_plan=(),
            summary=PlanSummary(),
        )
