"""Errors raised by the dispatch service layer."""


class DispatchError(Exception):
    """Base class for service-level dispatch failures."""


class NoOrdersError(DispatchError):
    def __init__(
        self, message: str = "No orders available in the system for dispatch planning"
    ):
        super().__init__(message)


class NoVehiclesError(DispatchError):
    def __init__(
        self, message: str = "No vehicles available in the fleet for dispatch planning"
    ):
        super().__init__(message)


class DuplicateOrderError(DispatchError):
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order with ID '{order_id}' already exists in the system")


class DuplicateVehicleError(DispatchError):
    def __init__(self, vehicle_id: str):
        self.vehicle_id = vehicle_id
        super().__init__(f"Vehicle with ID '{vehicle_id}' already exists in the fleet")


class DuplicateIdsInRequest(ValueError):
    """A single request carries the same id more than once."""


class OptimizationTimeout(DispatchError):
    def __init__(self, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Dispatch optimization did not finish within {timeout_seconds:g} seconds"
        )
