# delivery-sim/delivery_sim/economics.py
"""
Pure economics and timing rules for the Fleet Delivery Simulation.

Every function here is a stateless calculation over immutable snapshot values:
- Route economics: fuel cost and traffic-adjusted travel time
- Driver rules: fatigue and weekly hours
- Delivery time: projected arrival given the driver's fatigue
- Order economics: late penalty, high-value bonus and profit

Company rules (all amounts in ₹):
1. Fuel costs ₹5/km, plus ₹2/km on High traffic routes
2. Drivers working more than 8 hours this shift are 30% slower
3. Late deliveries cost a flat ₹50 penalty
4. High-value orders (> ₹1000) delivered on time earn a 10% bonus
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict

from . import config, utils
from .models import Driver, Order, Route, TrafficLevel


# Traffic multiplier lookup table
TRAFFIC_MULTIPLIERS: Dict[TrafficLevel, float] = {
    level: config.TRAFFIC_MULTIPLIERS[level.value] for level in TrafficLevel
}


# =============================================================================
# ROUTE ECONOMICS
# =============================================================================

def get_traffic_multiplier(traffic_level: TrafficLevel) -> float:
    """
    Get the travel time multiplier for a traffic level.

    Args:
        traffic_level: Traffic conditions on the route

    Returns:
        1.0 for Low, 1.2 for Medium, 1.5 for High
    """
    return TRAFFIC_MULTIPLIERS[traffic_level]


def fuel_cost(route: Route) -> float:
    """
    Calculate the fuel cost of driving a route.

    Example:
        >>> fuel_cost(Route("R001", 25, TrafficLevel.MEDIUM, 45))
        125.0
        >>> fuel_cost(Route("R002", 50, TrafficLevel.HIGH, 60))
        350.0
    """
    base_cost = route.distance * config.FUEL_COST_PER_KM
    surcharge = 0.0
    if route.traffic_level is TrafficLevel.HIGH:
        surcharge = route.distance * config.HIGH_TRAFFIC_SURCHARGE_PER_KM
    return base_cost + surcharge


def adjusted_time(route: Route) -> int:
    """
    Calculate the traffic-adjusted travel time of a route in whole minutes.

    Example:
        >>> adjusted_time(Route("R001", 25, TrafficLevel.MEDIUM, 45))
        54
    """
    return utils.round_half_up(route.base_time * get_traffic_multiplier(route.traffic_level))


def adjusted_hours(route: Route) -> float:
    """Traffic-adjusted travel time of a route in hours."""
    return adjusted_time(route) / 60


# =============================================================================
# DRIVER RULES
# =============================================================================

def is_fatigued(driver: Driver) -> bool:
    """A driver is fatigued when the current shift exceeds the threshold (strictly)."""
    return driver.current_shift_hours > config.FATIGUE_THRESHOLD_HOURS


def total_week_hours(driver: Driver) -> float:
    """Hours worked over the past week including the current shift."""
    return driver.past_week_hours + driver.current_shift_hours


# =============================================================================
# DELIVERY TIME
# =============================================================================

def delivery_minutes(route: Route, fatigued: bool) -> float:
    """
    Minutes from shift start until an order on this route is delivered.

    Fatigued drivers take FATIGUE_SLOWDOWN times longer. The result is not
    rounded, so a fatigued delivery is exactly 1.3x the rested one.
    """
    minutes = float(adjusted_time(route))
    if fatigued:
        minutes *= config.FATIGUE_SLOWDOWN
    return minutes


def delivery_time(start: datetime, route: Route, fatigued: bool) -> datetime:
    """
    Projected delivery timestamp for an order.

    Args:
        start: Shift start timestamp
        route: Route the order travels on
        fatigued: Fatigue flag of the assigned driver (False when unassigned)

    Returns:
        start + adjusted route time, slowed down for fatigued drivers
    """
    return utils.add_minutes(start, delivery_minutes(route, fatigued))


# =============================================================================
# ORDER ECONOMICS
# =============================================================================

def is_high_value(order: Order) -> bool:
    """Orders worth strictly more than the threshold qualify for the on-time bonus."""
    return order.value > config.HIGH_VALUE_THRESHOLD


def late_penalty(on_time: bool) -> int:
    """Flat penalty charged for a late delivery."""
    return 0 if on_time else config.LATE_DELIVERY_PENALTY


def on_time_bonus(order: Order, on_time: bool) -> float:
    """
    Bonus earned by an order.

    Only high-value orders delivered on time earn it; the amount is rounded
    to cents.
    """
    if on_time and is_high_value(order):
        return utils.round2(order.value * config.HIGH_VALUE_BONUS_RATE)
    return 0.0


def order_profit(order_value: float, bonus: float, penalty: int, fuel: float) -> float:
    """Profit of a single order: value + bonus - penalty - fuel cost."""
    return order_value + bonus - penalty - fuel
