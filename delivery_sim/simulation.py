# delivery-sim/delivery_sim/simulation.py
"""
Simulation Engine for the Fleet Delivery Simulation.

This module drives one complete simulation run:
- Input validation
- Snapshot fetch from the data source (drivers, routes, pending orders)
- Greedy order-to-driver assignment
- Per-order delivery time and economics
- KPI calculation

A run is all-or-nothing: it either returns a complete SimulationResult or
raises. Nothing is persisted and no state survives between runs.

KEY METRIC: Efficiency Score = On-Time Deliveries / Total Orders (%)
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence

from . import economics, utils
from .data_source import DataSource
from .dispatch import AssignmentEngine, build_route_map
from .exceptions import NotFoundError
from .models import (
    UNASSIGNED,
    DeliveryStatus,
    DriverAssignment,
    Order,
    OrderResult,
    Route,
    SimulationInput,
    SimulationResult,
    TrafficLevel,
)
from .validation import validate_simulation_input

logger = logging.getLogger(__name__)


def resolve_start(sim_input: SimulationInput, orders: Sequence[Order]) -> datetime:
    """
    Turn the 'HH:MM' start time into a UTC timestamp.

    The date is run_date when given, otherwise the UTC date of the earliest
    pending deadline, so a run depends only on its snapshot.
    """
    clock = utils.parse_start_time(sim_input.start_time)
    run_date = sim_input.run_date
    if run_date is None:
        earliest = min(utils.ensure_utc(o.delivery_deadline) for o in orders)
        run_date = earliest.date()
    return utils.combine_utc(run_date, clock)


def calculate_order_results(
    orders: Sequence[Order],
    routes: Sequence[Route],
    assignments: Sequence[DriverAssignment],
    start: datetime
) -> List[OrderResult]:
    """
    Compute delivery time and economics for every pending order.

    Results keep the snapshot order of the orders. Unassigned orders are
    timed as if a rested driver delivered them.

    Raises:
        NotFoundError: If an order references a route missing from the snapshot
    """
    route_map = build_route_map(routes)

    # order_id -> assignment; an order is in at most one assignment
    driver_for_order: Dict[str, DriverAssignment] = {}
    for assignment in assignments:
        for order_id in assignment.assigned_orders:
            driver_for_order[order_id] = assignment

    results: List[OrderResult] = []
    for order in orders:
        route = route_map.get(order.assigned_route_id)
        if route is None:
            raise NotFoundError(f"Route {order.assigned_route_id} not found")

        assigned = driver_for_order.get(order.order_id)
        fatigued = assigned.is_fatigued if assigned is not None else False

        delivered_at = economics.delivery_time(start, route, fatigued)
        on_time = delivered_at <= utils.ensure_utc(order.delivery_deadline)

        fuel = economics.fuel_cost(route)
        penalty = economics.late_penalty(on_time)
        bonus = economics.on_time_bonus(order, on_time)

        results.append(OrderResult(
            order_id=order.order_id,
            assigned_driver=assigned.driver_id if assigned is not None else UNASSIGNED,
            route_id=order.assigned_route_id,
            order_value=order.value,
            delivery_status=DeliveryStatus.ON_TIME if on_time else DeliveryStatus.LATE,
            delivery_time=delivered_at,
            fuel_cost=fuel,
            penalty=penalty,
            bonus=bonus,
            profit=economics.order_profit(order.value, bonus, penalty, fuel),
        ))

    return results


def calculate_fuel_by_traffic(
    order_results: Sequence[OrderResult],
    routes: Sequence[Route]
) -> Dict[str, float]:
    """Total fuel cost per traffic level, with every level present."""
    route_map = build_route_map(routes)
    totals: Dict[str, float] = {level.value: 0.0 for level in TrafficLevel}
    for result in order_results:
        level = route_map[result.route_id].traffic_level
        totals[level.value] += result.fuel_cost
    return {level: utils.round2(total) for level, total in totals.items()}


def calculate_kpis(order_results: Sequence[OrderResult]) -> Dict[str, Any]:
    """
    Roll order results up into fleet-level KPIs.

    Monetary totals and the efficiency score are rounded to 2 decimals;
    penalties stay an integer sum.
    """
    total_orders = len(order_results)
    on_time_deliveries = sum(1 for r in order_results if r.is_on_time)
    late_deliveries = total_orders - on_time_deliveries

    efficiency_score = 0.0
    if total_orders > 0:
        efficiency_score = (on_time_deliveries / total_orders) * 100

    return {
        "total_profit": utils.round2(sum(r.profit for r in order_results)),
        "efficiency_score": utils.round2(efficiency_score),
        "on_time_deliveries": on_time_deliveries,
        "late_deliveries": late_deliveries,
        "fuel_cost": utils.round2(sum(r.fuel_cost for r in order_results)),
        "penalties": sum(r.penalty for r in order_results),
        "bonuses": utils.round2(sum(r.bonus for r in order_results)),
        "unassigned_orders": sum(1 for r in order_results if not r.is_assigned),
    }


class Simulation:
    """
    Runs delivery simulations against a data source.

    The simulation itself is stateless: run() can be called any number of
    times, and concurrently, because every call fetches its own snapshot and
    builds its own assignments.

    Attributes:
        source: Where drivers, routes and pending orders come from
        engine: The assignment engine used for every run
    """

    def __init__(self, source: DataSource) -> None:
        self.source = source
        self.engine = AssignmentEngine()

    def run(self, sim_input: SimulationInput) -> SimulationResult:
        """
        Run one simulation.

        Args:
            sim_input: Run parameters

        Returns:
            Complete SimulationResult

        Raises:
            ValidationError: If sim_input is invalid (nothing is fetched)
            NotFoundError: If there are no drivers, no pending orders, or an
                order references an unknown route
            InfrastructureError: If the data source fails
        """
        validate_simulation_input(sim_input)

        drivers = self.source.fetch_drivers(sim_input.available_drivers)
        routes = self.source.fetch_routes()
        orders = self.source.fetch_pending_orders()

        if not drivers:
            raise NotFoundError("No drivers available for simulation")
        if not orders:
            raise NotFoundError("No pending orders for simulation")

        logger.info(
            f"Starting simulation: {len(drivers)} drivers, {len(routes)} routes, "
            f"{len(orders)} pending orders, start {sim_input.start_time}, "
            f"cap {sim_input.max_hours_per_day}h"
        )

        start = resolve_start(sim_input, orders)

        assignments = self.engine.assign(drivers, orders, routes, sim_input.max_hours_per_day)
        order_results = calculate_order_results(orders, routes, assignments, start)
        kpis = calculate_kpis(order_results)

        result = SimulationResult(
            driver_assignments=assignments,
            order_results=order_results,
            fuel_cost_by_traffic=calculate_fuel_by_traffic(order_results, routes),
            **kpis,
        )

        logger.info(
            f"Simulation complete: profit {result.total_profit}, "
            f"efficiency {result.efficiency_score}%, "
            f"{result.on_time_deliveries} on time, {result.late_deliveries} late"
        )
        return result

    def get_status(self) -> Dict[str, Any]:
        """
        Summarize what a run would currently see.

        Returns:
            Counts of drivers, routes and pending orders plus a timestamp
        """
        drivers = self.source.fetch_drivers(limit=sys.maxsize)
        routes = self.source.fetch_routes()
        orders = self.source.fetch_pending_orders()
        return {
            "availableDrivers": len(drivers),
            "totalRoutes": len(routes),
            "pendingOrders": len(orders),
            "systemStatus": "Ready",
            "lastUpdated": datetime.now(timezone.utc).isoformat(),
        }
