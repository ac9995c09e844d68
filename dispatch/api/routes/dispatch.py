"""
Dispatch endpoints
==================

POST   /api/v1/dispatch/orders    -- store a batch of delivery orders
POST   /api/v1/dispatch/vehicles  -- store a batch of vehicles
GET    /api/v1/dispatch/plan      -- run the optimizer over everything stored
GET    /api/v1/dispatch/orders    -- list stored orders
GET    /api/v1/dispatch/vehicles  -- list stored vehicles
DELETE /api/v1/dispatch/orders    -- remove all orders
DELETE /api/v1/dispatch/vehicles  -- remove all vehicles
GET    /api/v1/dispatch/health    -- liveness check
"""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, Request

from dispatch.api.dependencies import get_dispatch_service
from dispatch.api.middleware import limiter
from dispatch.api.schemas import (
    ApiResponse,
    DispatchPlanResponse,
    OrderBatchRequest,
    OrderResponse,
    VehicleBatchRequest,
    VehicleResponse,
)
from dispatch.config import settings
from dispatch.infrastructure.models import OrderModel, VehicleModel
from dispatch.services.dispatcher import DispatchService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dispatch", tags=["dispatch"])


@router.post(
    "/orders",
    response_model=ApiResponse,
    summary="Accept a batch of delivery orders",
    responses={409: {"description": "An order id already exists."}},
)
@limiter.limit(settings.rate_limit)
async def accept_orders(
    request: Request,
    body: OrderBatchRequest,
    service: DispatchService = Depends(get_dispatch_service),
):
    logger.info("POST /dispatch/orders - received %d orders", len(body.orders))
    models = [
        OrderModel(
            order_id=o.order_id,
            latitude=o.latitude,
            longitude=o.longitude,
            address=o.address,
            package_weight=o.package_weight,
            priority=o.priority,
        )
        for o in body.orders
    ]
    message = await service.save_orders(models)
    return ApiResponse(message=message)


@router.post(
    "/vehicles",
    response_model=ApiResponse,
    summary="Accept a batch of vehicles",
    responses={409: {"description": "A vehicle id already exists."}},
)
@limiter.limit(settings.rate_limit)
async def accept_vehicles(
    request: Request,
    body: VehicleBatchRequest,
    service: DispatchService = Depends(get_dispatch_service),
):
    logger.info("POST /dispatch/vehicles - received %d vehicles", len(body.vehicles))
    models = [
        VehicleModel(
            vehicle_id=v.vehicle_id,
            capacity=v.capacity,
            current_latitude=v.current_latitude,
            current_longitude=v.current_longitude,
            current_address=v.current_address,
        )
        for v in body.vehicles
    ]
    message = await service.save_vehicles(models)
    return ApiResponse(message=message)


@router.get(
    "/plan",
    response_model=DispatchPlanResponse,
    summary="Generate a dispatch plan",
    description=(
        "Sorts stored orders by priority (then weight), and greedily assigns "
        "each to the nearest vehicle with enough remaining capacity."
    ),
)
@limiter.limit(settings.rate_limit)
async def get_dispatch_plan(
    request: Request,
    service: DispatchService = Depends(get_dispatch_service),
):
    plan = await service.get_dispatch_plan()
    return DispatchPlanResponse.model_validate(asdict(plan))


@router.get("/orders", response_model=list[OrderResponse], summary="List orders")
@limiter.limit(settings.rate_limit)
async def list_orders(
    request: Request,
    service: DispatchService = Depends(get_dispatch_service),
):
    return await service.list_orders()


@router.get(
    "/vehicles", response_model=list[VehicleResponse], summary="List vehicles"
)
@limiter.limit(settings.rate_limit)
async def list_vehicles(
    request: Request,
    service: DispatchService = Depends(get_dispatch_service),
):
    return await service.list_vehicles()


@router.delete("/orders", response_model=ApiResponse, summary="Delete all orders")
@limiter.limit(settings.rate_limit)
async def clear_orders(
    request: Request,
    service: DispatchService = Depends(get_dispatch_service),
):
    return ApiResponse(message=await service.clear_orders())


@router.delete(
    "/vehicles", response_model=ApiResponse, summary="Delete all vehicles"
)
@limiter.limit(settings.rate_limit)
async def clear_vehicles(
    request: Request,
    service: DispatchService = Depends(get_dispatch_service),
):
    return ApiResponse(message=await service.clear_vehicles())


@router.get("/health", response_model=ApiResponse, summary="Health check")
async def health():
    return ApiResponse(message="Dispatch API is running")
