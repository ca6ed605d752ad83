# delivery-sim/delivery_sim/scoring.py
"""
Scoring functions for greedy order-to-driver assignment.

For each order, every driver with enough hours left is scored and the highest
score wins. The score rewards:
- Rested drivers over fatigued ones
- Drivers with fewer orders so far (spreads the workload)
- Drivers who have driven less so far in this run

Key Design Principles:
1. Higher score = better candidate
2. Scores are floored at 0, so heavily loaded drivers still remain candidates
3. Feasibility is checked separately and is never traded off against score
"""

from __future__ import annotations

from . import config, economics
from .models import DriverAssignment, Route


def can_handle_order(
    assignment: DriverAssignment,
    route: Route,
    max_hours_per_day: float
) -> bool:
    """
    Check whether a driver has enough hours left today for a route.

    Args:
        assignment: The driver's state so far in this run
        route: Route of the order being considered
        max_hours_per_day: Daily hour cap per driver

    Returns:
        True if the route fits within the daily cap (boundary inclusive)
    """
    return assignment.total_hours + economics.adjusted_hours(route) <= max_hours_per_day


def calculate_driver_score(assignment: DriverAssignment) -> float:
    """
    Score a feasible driver for the next order.

    score = 100 - 30 (if fatigued) - 5 * orders so far - 0.1 * km so far

    Args:
        assignment: The driver's state so far in this run

    Returns:
        Score in [0, 100]; higher is better

    Example:
        A rested driver with 2 orders and 45 km already assigned scores
        100 - 10 - 4.5 = 85.5
    """
    score = config.BASE_DRIVER_SCORE

    if assignment.is_fatigued:
        score -= config.FATIGUE_SCORE_PENALTY

    score -= assignment.num_orders * config.PER_ORDER_SCORE_PENALTY
    score -= assignment.total_distance * config.PER_KM_SCORE_PENALTY

    return max(0.0, score)
