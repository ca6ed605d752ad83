# delivery-sim/delivery_sim/dispatch.py
"""
Assignment Engine for the Fleet Delivery Simulation.

This module implements the greedy order-to-driver assignment pass:

1. Every driver starts the run with an empty DriverAssignment. The fatigue
   flag is fixed from the driver's current shift and never recomputed.

2. Orders are walked in Earliest-Deadline-First order (stable, so orders with
   equal deadlines keep their snapshot order).

3. For each order, every driver with enough hours left bids its score. The
   highest score wins; on ties the first driver in fleet order wins.

4. Orders that no driver can fit stay unassigned. There is no retry, no
   backtracking and no relaxation of the hour cap.

It is not a global optimiser: the result depends on deadline
order and on the order in which drivers were fetched.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from . import economics, scoring, utils
from .models import Driver, DriverAssignment, Order, Route

logger = logging.getLogger(__name__)


def build_route_map(routes: Sequence[Route]) -> Dict[str, Route]:
    """Build a route_id -> Route lookup."""
    return {route.route_id: route for route in routes}


def sort_by_deadline(orders: Sequence[Order]) -> List[Order]:
    """Return orders sorted by delivery deadline, earliest first (stable)."""
    return sorted(orders, key=lambda o: utils.ensure_utc(o.delivery_deadline))


class AssignmentEngine:
    """
    Greedy allocator of orders to drivers under a daily hour cap.

    The engine holds no state between calls; every call to assign() builds
    fresh DriverAssignment objects and never mutates its inputs.
    """

    def _init_assignments(self, drivers: Sequence[Driver]) -> List[DriverAssignment]:
        """Create one empty assignment per driver, in fleet order."""
        return [
            DriverAssignment(
                driver_id=driver.driver_id,
                driver_name=driver.name,
                is_fatigued=economics.is_fatigued(driver),
            )
            for driver in drivers
        ]

    def _select_driver(
        self,
        assignments: List[DriverAssignment],
        route: Route,
        max_hours_per_day: float
    ) -> Optional[DriverAssignment]:
        """
        Pick the feasible driver with the strictly highest score.

        Scanning in fleet order with a strict comparison means the first
        driver wins ties.
        """
        best_driver: Optional[DriverAssignment] = None
        best_score: float = -1.0

        for assignment in assignments:
            if not scoring.can_handle_order(assignment, route, max_hours_per_day):
                continue

            score = scoring.calculate_driver_score(assignment)
            if score > best_score:
                best_score = score
                best_driver = assignment

        return best_driver

    def _assign_order_to_driver(
        self,
        assignment: DriverAssignment,
        order: Order,
        route: Route
    ) -> None:
        """Record an accepted order and charge its hours and distance to the driver."""
        assignment.assigned_orders.append(order.order_id)
        assignment.total_hours += economics.adjusted_hours(route)
        assignment.total_distance += route.distance

    def assign(
        self,
        drivers: Sequence[Driver],
        orders: Sequence[Order],
        routes: Sequence[Route],
        max_hours_per_day: float
    ) -> List[DriverAssignment]:
        """
        Assign orders to drivers greedily.

        Args:
            drivers: Drivers taking part in this run, in fleet order
            orders: Pending orders
            routes: All known routes
            max_hours_per_day: Daily hour cap per driver

        Returns:
            One DriverAssignment per driver, in the same order as drivers
        """
        assignments = self._init_assignments(drivers)
        route_map = build_route_map(routes)
        assigned_count = 0

        for order in sort_by_deadline(orders):
            route = route_map.get(order.assigned_route_id)
            if route is None:
                # Surfaces as a hard failure when order results are computed
                logger.warning(
                    f"Order {order.order_id} references unknown route "
                    f"{order.assigned_route_id}; skipping assignment"
                )
                continue

            best_driver = self._select_driver(assignments, route, max_hours_per_day)

            if best_driver is None:
                logger.debug(f"Order {order.order_id}: no driver has hours left")
                continue

            self._assign_order_to_driver(best_driver, order, route)
            assigned_count += 1
            logger.debug(
                f"Order {order.order_id} -> {best_driver.driver_id} "
                f"({best_driver.total_hours:.2f}h, {best_driver.total_distance:.1f}km)"
            )

        logger.info(
            f"Assigned {assigned_count}/{len(orders)} orders "
            f"across {len(assignments)} drivers"
        )
        return assignments
