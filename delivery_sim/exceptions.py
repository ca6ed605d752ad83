# delivery-sim/delivery_sim/exceptions.py
"""
Exceptions raised by the Fleet Delivery Simulation.

Every failure aborts the whole run; no partial result is ever returned.
The hierarchy also subclasses the matching builtin so callers that catch
ValueError or LookupError keep working.
"""


class SimulationError(Exception):
    """Base class for all simulation failures."""


class ValidationError(SimulationError, ValueError):
    """Raised when simulation input is out of range or malformed."""


class NotFoundError(SimulationError, LookupError):
    """Raised when the snapshot lacks drivers, pending orders or a referenced route."""


class InfrastructureError(SimulationError):
    """Raised by a data source when the underlying store cannot be reached."""
