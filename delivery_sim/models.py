# delivery-sim/delivery_sim/models.py
"""
Core domain models for the Fleet Delivery Simulation.

Snapshot entities are read-only inputs fetched before a run:
- Driver: A member of the fleet with their current and weekly hours
- Route: A delivery route with distance, traffic level and base travel time
- Order: An undelivered order bound to a route with a delivery deadline

Run entities are created fresh for every simulation and thrown away afterwards:
- DriverAssignment: Per-driver accumulator built by the assignment pass
- OrderResult: Timing and economics of one order
- SimulationResult: Fleet-level KPIs plus all assignments and order results
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional


UNASSIGNED = "unassigned"
"""Placeholder driver id for orders no driver could accept."""


class TrafficLevel(Enum):
    """Traffic conditions on a route. Drives the time multiplier and fuel surcharge."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class DeliveryStatus(Enum):
    """Projected outcome of an order against its deadline."""
    ON_TIME = "On Time"
    LATE = "Late"


@dataclass(frozen=True)
class Driver:
    """
    Represents a driver in the fleet snapshot.

    Attributes:
        driver_id: Unique identifier
        name: Display name
        current_shift_hours: Hours already worked in the current shift (0-24)
        past_week_hours: Hours worked over the past week (0-168)
    """
    driver_id: str
    name: str
    current_shift_hours: float
    past_week_hours: float

    def __repr__(self) -> str:
        return f"Driver({self.driver_id}, shift={self.current_shift_hours}h)"


@dataclass(frozen=True)
class Route:
    """
    Represents a delivery route.

    Attributes:
        route_id: Unique identifier (e.g. 'R001')
        distance: Route length in km
        traffic_level: Traffic conditions on the route
        base_time: Travel time in minutes with no traffic
    """
    route_id: str
    distance: float
    traffic_level: TrafficLevel
    base_time: float

    def __repr__(self) -> str:
        return f"Route({self.route_id}, {self.distance}km, {self.traffic_level.value})"


@dataclass(frozen=True)
class Order:
    """
    Represents an order awaiting delivery.

    Attributes:
        order_id: Unique identifier (e.g. 'O001')
        value: Order value in ₹
        assigned_route_id: Route the order travels on
        delivery_deadline: Latest acceptable delivery timestamp (timezone-aware)
        is_delivered: Whether the order has already been delivered
    """
    order_id: str
    value: float
    assigned_route_id: str
    delivery_deadline: datetime
    is_delivered: bool = False

    def __repr__(self) -> str:
        return f"Order({self.order_id}, route={self.assigned_route_id})"


@dataclass(frozen=True)
class SimulationInput:
    """
    Parameters for a single simulation run.

    Attributes:
        available_drivers: How many drivers to pull from the fleet (1-50)
        start_time: Shift start as 'HH:MM' (24-hour clock)
        max_hours_per_day: Daily hour cap per driver (1-24)
        run_date: Calendar date of the start time. Defaults to the date of the
            earliest pending deadline.
    """
    available_drivers: int
    start_time: str
    max_hours_per_day: int
    run_date: Optional[date] = None


@dataclass
class DriverAssignment:
    """
    Per-driver state accumulated during one assignment pass.

    The fatigue flag is copied from the driver when the run starts and is never
    recomputed, even as hours accrue.
    """
    driver_id: str
    driver_name: str
    is_fatigued: bool
    assigned_orders: List[str] = field(default_factory=list)
    total_hours: float = 0.0
    total_distance: float = 0.0

    @property
    def num_orders(self) -> int:
        """Returns the number of orders assigned so far."""
        return len(self.assigned_orders)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "driverId": self.driver_id,
            "driverName": self.driver_name,
            "assignedOrders": list(self.assigned_orders),
            "totalHours": self.total_hours,
            "totalDistance": self.total_distance,
            "isFatigued": self.is_fatigued,
        }

    def __repr__(self) -> str:
        return f"DriverAssignment({self.driver_id}, orders={self.num_orders}, hours={self.total_hours:.2f})"


@dataclass
class OrderResult:
    """Projected delivery outcome and economics of a single order."""
    order_id: str
    assigned_driver: str
    route_id: str
    order_value: float
    delivery_status: DeliveryStatus
    delivery_time: datetime
    fuel_cost: float
    penalty: int
    bonus: float
    profit: float

    @property
    def is_on_time(self) -> bool:
        return self.delivery_status is DeliveryStatus.ON_TIME

    @property
    def is_assigned(self) -> bool:
        return self.assigned_driver != UNASSIGNED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orderId": self.order_id,
            "assignedDriver": self.assigned_driver,
            "routeId": self.route_id,
            "orderValue": self.order_value,
            "deliveryStatus": self.delivery_status.value,
            "deliveryTime": self.delivery_time.isoformat(),
            "fuelCost": self.fuel_cost,
            "penalty": self.penalty,
            "bonus": self.bonus,
            "profit": self.profit,
        }


@dataclass
class SimulationResult:
    """
    Container for simulation results and KPIs.

    All monetary totals except penalties are rounded to 2 decimals.
    """
    total_profit: float
    efficiency_score: float
    on_time_deliveries: int
    late_deliveries: int
    fuel_cost: float
    penalties: int
    bonuses: float
    driver_assignments: List[DriverAssignment]
    order_results: List[OrderResult]
    unassigned_orders: int = 0
    fuel_cost_by_traffic: Dict[str, float] = field(default_factory=dict)

    @property
    def total_orders(self) -> int:
        return len(self.order_results)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the flat structure returned by the simulation endpoint."""
        return {
            "totalProfit": self.total_profit,
            "efficiencyScore": self.efficiency_score,
            "onTimeDeliveries": self.on_time_deliveries,
            "lateDeliveries": self.late_deliveries,
            "fuelCost": self.fuel_cost,
            "penalties": self.penalties,
            "bonuses": self.bonuses,
            "unassignedOrders": self.unassigned_orders,
            "fuelCostByTraffic": dict(self.fuel_cost_by_traffic),
            "driverAssignments": [a.to_dict() for a in self.driver_assignments],
            "orderResults": [r.to_dict() for r in self.order_results],
        }
