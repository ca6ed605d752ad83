# delivery-sim/delivery_sim/validation.py
"""
Validation of simulation input and raw snapshot fields.
"""

from __future__ import annotations

from . import config, utils
from .exceptions import ValidationError
from .models import SimulationInput


def _is_int(value) -> bool:
    # bool is an int subclass but never a valid count
    return isinstance(value, int) and not isinstance(value, bool)


def validate_simulation_input(sim_input: SimulationInput) -> None:
    """
    Check simulation parameters before any data is fetched.

    Raises:
        ValidationError: With a message suitable for showing to the caller
    """
    drivers = sim_input.available_drivers
    if not _is_int(drivers):
        raise ValidationError("Available drivers must be an integer")
    if drivers < config.MIN_AVAILABLE_DRIVERS:
        raise ValidationError("Available drivers must be greater than 0")
    if drivers > config.MAX_AVAILABLE_DRIVERS:
        raise ValidationError(f"Available drivers cannot exceed {config.MAX_AVAILABLE_DRIVERS}")

    hours = sim_input.max_hours_per_day
    if not _is_int(hours):
        raise ValidationError("Max hours per day must be an integer")
    if hours < config.MIN_HOURS_PER_DAY or hours > config.MAX_HOURS_PER_DAY:
        raise ValidationError(
            f"Max hours per day must be between {config.MIN_HOURS_PER_DAY} "
            f"and {config.MAX_HOURS_PER_DAY}"
        )

    if not utils.is_valid_start_time(sim_input.start_time):
        raise ValidationError("Start time must be in HH:MM format")


def check_range(name: str, value: float, low: float, high: float) -> float:
    """
    Ensure a numeric snapshot field lies within [low, high].

    Raises:
        ValueError: If the value is out of range
    """
    if value < low or value > high:
        raise ValueError(f"{name} must be between {low:g} and {high:g}, got {value:g}")
    return value


def check_positive(name: str, value: float) -> float:
    """
    Ensure a numeric snapshot field is strictly positive.

    Raises:
        ValueError: If the value is zero or negative
    """
    if value <= 0:
        raise ValueError(f"{name} must be greater than 0, got {value:g}")
    return value
