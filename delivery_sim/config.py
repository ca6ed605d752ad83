# delivery-sim/delivery_sim/config.py
"""
Configuration parameters for the Fleet Delivery Simulation.

This module centralizes the company rules and tunable parameters, making it easy to:
- Review the business rules that drive profit and penalties
- Fine-tune the driver scoring used during assignment
- Point the simulation at a different data source

Business rules are marked Final: changing them changes the meaning of every KPI.
"""

from typing import Dict, Final

# =============================================================================
# ROUTE ECONOMICS
# =============================================================================

FUEL_COST_PER_KM: Final[float] = 5.0
"""Base fuel cost per kilometre (₹/km)."""

HIGH_TRAFFIC_SURCHARGE_PER_KM: Final[float] = 2.0
"""Extra fuel cost per kilometre on High traffic routes (₹/km)."""

TRAFFIC_MULTIPLIERS: Final[Dict[str, float]] = {
    "Low": 1.0,
    "Medium": 1.2,
    "High": 1.5,
}
"""Multiplier applied to a route's base time for each traffic level."""

# =============================================================================
# DRIVER FATIGUE
# =============================================================================

FATIGUE_THRESHOLD_HOURS: Final[float] = 8.0
"""A driver whose current shift exceeds this many hours is fatigued for the whole run."""

FATIGUE_SLOWDOWN: Final[float] = 1.3
"""Delivery time multiplier for fatigued drivers (30% slower)."""

# =============================================================================
# DRIVER SCORING
# =============================================================================
# Higher score = better candidate. Scores are floored at 0.

BASE_DRIVER_SCORE: float = 100.0
"""Starting score for every feasible driver."""

FATIGUE_SCORE_PENALTY: float = 30.0
"""Subtracted from the score of a fatigued driver."""

PER_ORDER_SCORE_PENALTY: float = 5.0
"""Subtracted per order already assigned to the driver in this run."""

PER_KM_SCORE_PENALTY: float = 0.1
"""Subtracted per kilometre the driver has already been assigned in this run."""

# =============================================================================
# ORDER ECONOMICS
# =============================================================================

LATE_DELIVERY_PENALTY: Final[int] = 50
"""Flat penalty (₹) for an order delivered after its deadline."""

HIGH_VALUE_THRESHOLD: Final[float] = 1000.0
"""Orders worth strictly more than this are high-value."""

HIGH_VALUE_BONUS_RATE: Final[float] = 0.10
"""Bonus rate paid on high-value orders delivered on time."""

# =============================================================================
# INPUT LIMITS
# =============================================================================

MIN_AVAILABLE_DRIVERS: int = 1
MAX_AVAILABLE_DRIVERS: int = 50
"""Range accepted for the number of drivers pulled into a run."""

MIN_HOURS_PER_DAY: int = 1
MAX_HOURS_PER_DAY: int = 24
"""Range accepted for the per-driver daily hour cap."""

MAX_SHIFT_HOURS: float = 24.0
MAX_WEEK_HOURS: float = 168.0
"""Upper bounds for driver hour fields when loading a snapshot."""

MIN_ORDER_VALUE: float = 1.0
MAX_ORDER_VALUE: float = 100000.0
"""Range accepted for order values when loading a snapshot."""

# =============================================================================
# DATA SOURCES
# =============================================================================

DEFAULT_DRIVERS_FILE: str = "data/drivers.csv"
DEFAULT_ROUTES_FILE: str = "data/routes.csv"
DEFAULT_ORDERS_FILE: str = "data/orders.csv"
"""Snapshot files used by the CLI and dashboard when nothing else is given."""

BACKOFFICE_API_URL: str = "http://localhost:5000"
"""
Back-office REST API root. Options:
- "http://localhost:5000" (local development server)
- the deployed back-office URL
"""

BACKOFFICE_TIMEOUT_SECONDS: float = 10.0
"""Timeout for back-office API requests. The engine itself never retries."""
