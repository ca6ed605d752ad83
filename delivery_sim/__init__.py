# delivery-sim/delivery_sim/__init__.py

from .models import (
    Driver,
    Route,
    Order,
    TrafficLevel,
    DeliveryStatus,
    SimulationInput,
    DriverAssignment,
    OrderResult,
    SimulationResult,
    UNASSIGNED,
)
from .exceptions import SimulationError, ValidationError, NotFoundError, InfrastructureError
from .economics import fuel_cost, adjusted_time, delivery_time, is_fatigued
from .dispatch import AssignmentEngine
from .simulation import Simulation, calculate_kpis
from .data_source import InMemoryDataSource, CsvDataSource, BackofficeDataSource

__version__ = "1.0.0"

__all__ = [
    # Models
    "Driver",
    "Route",
    "Order",
    "TrafficLevel",
    "DeliveryStatus",
    "SimulationInput",
    "DriverAssignment",
    "OrderResult",
    "SimulationResult",
    "UNASSIGNED",
    # Errors
    "SimulationError",
    "ValidationError",
    "NotFoundError",
    "InfrastructureError",
    # Core
    "Simulation",
    "AssignmentEngine",
    # Data sources
    "InMemoryDataSource",
    "CsvDataSource",
    "BackofficeDataSource",
    # Functions
    "fuel_cost",
    "adjusted_time",
    "delivery_time",
    "is_fatigued",
    "calculate_kpis",
]
