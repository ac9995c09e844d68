"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from dispatch.domain.enums import PlanStatus, Priority

ID_PATTERN = r"^[A-Z0-9-]+$"


# ── Requests ──────────────────────────────────────────────────────────


class OrderIn(BaseModel):
    order_id: str = Field(..., min_length=1, max_length=50, pattern=ID_PATTERN)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: str = Field(..., min_length=10, max_length=500)
    package_weight: int = Field(..., ge=1, le=100_000, description="Grams.")
    priority: Priority


class VehicleIn(BaseModel):
    vehicle_id: str = Field(..., min_length=1, max_length=50, pattern=ID_PATTERN)
    capacity: int = Field(..., ge=1_000, le=50_000_000, description="Grams.")
    current_latitude: float = Field(..., ge=-90, le=90)
    current_longitude: float = Field(..., ge=-180, le=180)
    current_address: Optional[str] = Field(None, min_length=10, max_length=500)


class OrderBatchRequest(BaseModel):
    orders: list[OrderIn] = Field(..., min_length=1, max_length=100)


class VehicleBatchRequest(BaseModel):
    vehicles: list[VehicleIn] = Field(..., min_length=1, max_length=50)


# ── Responses ─────────────────────────────────────────────────────────


class ApiResponse(BaseModel):
    success: bool = True
    message: str


class OrderResponse(BaseModel):
    order_id: str
    latitude: float
    longitude: float
    address: str
    package_weight: int
    priority: Priority
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class VehicleResponse(BaseModel):
    vehicle_id: str
    capacity: int
    current_latitude: float
    current_longitude: float
    current_address: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AssignedOrderResponse(BaseModel):
    order_id: str
    address: Optional[str] = None
    package_weight: int
    priority: Priority
    distance_from_vehicle: str


class VehiclePlanResponse(BaseModel):
    vehicle_id: str
    total_load: int
    total_distance: str
    assigned_orders: list[AssignedOrderResponse]
    order_count: int
    utilization_percentage: float


class PlanSummaryResponse(BaseModel):
    total_orders: int
    assigned_orders: int
    unassigned_orders: int
    total_vehicles: int
    used_vehicles: int
    total_distance_covered: str
    average_utilization: float


class DispatchPlanResponse(BaseModel):
    status: PlanStatus
    message: str
    dispatch_plan: list[VehiclePlanResponse] = []
    summary: PlanSummaryResponse
    unassigned_order_ids: list[str] = []


class ErrorResponse(BaseModel):
    timestamp: datetime = Field(default_factory=datetime.now)
    status: int
    error: str
    message: str
    path: str
    validation_errors: Optional[dict[str, str]] = None
    details: Optional[dict[str, Any]] = None
