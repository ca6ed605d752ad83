# delivery-sim/delivery_sim/data_source.py
"""
Data sources that supply the driver/route/order snapshot for a simulation run.

The simulation engine never touches storage itself. It asks a data source for:
- The first N drivers, in the source's own order (no sorting before truncation)
- All routes
- All orders not yet delivered

Three sources are provided:
- InMemoryDataSource: plain lists, for tests and embedding
- CsvDataSource: CSV files exported from the back-office
- BackofficeDataSource: the back-office REST API

Records use the back-office field names (camelCase) in every source, so a CSV
export and an API response are parsed by the same functions.
"""

from __future__ import annotations

import csv
import logging
import os
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, TypeVar

import requests

from . import config, utils
from .exceptions import InfrastructureError
from .models import Driver, Order, Route, TrafficLevel
from .validation import check_positive, check_range

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DataSource(Protocol):
    """Anything that can hand the simulation a snapshot of the back-office data."""

    def fetch_drivers(self, limit: int) -> List[Driver]:
        ...

    def fetch_routes(self) -> List[Route]:
        ...

    def fetch_pending_orders(self) -> List[Order]:
        ...


# =============================================================================
# RECORD PARSING
# =============================================================================

_TRUE_STRINGS = {"true", "1", "yes", "y"}


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUE_STRINGS


def _record_id(record: Mapping[str, Any], *keys: str) -> str:
    """Return the first non-empty id among keys."""
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return str(value).strip()
    raise KeyError(keys[0])


def driver_from_record(record: Mapping[str, Any]) -> Driver:
    """
    Build a Driver from a back-office record.

    Raises:
        KeyError: If a required field is missing
        ValueError: If a field is malformed or out of range
    """
    return Driver(
        driver_id=_record_id(record, "driverId", "_id", "id"),
        name=str(record["name"]).strip(),
        current_shift_hours=check_range(
            "currentShiftHours", float(record["currentShiftHours"]), 0, config.MAX_SHIFT_HOURS
        ),
        past_week_hours=check_range(
            "pastWeekHours", float(record["pastWeekHours"]), 0, config.MAX_WEEK_HOURS
        ),
    )


def route_from_record(record: Mapping[str, Any]) -> Route:
    """
    Build a Route from a back-office record.

    Unknown traffic levels are rejected here, so route economics never see one.

    Raises:
        KeyError: If a required field is missing
        ValueError: If a field is malformed, out of range, or the traffic level is unknown
    """
    return Route(
        route_id=_record_id(record, "routeId", "id").upper(),
        distance=check_positive("distance", float(record["distance"])),
        traffic_level=TrafficLevel(str(record["trafficLevel"]).strip()),
        base_time=check_positive("baseTime", float(record["baseTime"])),
    )


def order_from_record(record: Mapping[str, Any]) -> Order:
    """
    Build an Order from a back-office record.

    The assigned route may arrive as a plain id or as a populated route object.

    Raises:
        KeyError: If a required field is missing
        ValueError: If a field is malformed or out of range
    """
    route_ref = record["assignedRoute"]
    if isinstance(route_ref, Mapping):
        route_ref = route_ref["routeId"]

    return Order(
        order_id=_record_id(record, "orderId", "id").upper(),
        value=check_range(
            "value", float(record["value"]), config.MIN_ORDER_VALUE, config.MAX_ORDER_VALUE
        ),
        assigned_route_id=str(route_ref).strip().upper(),
        delivery_deadline=utils.parse_timestamp(str(record["deliveryTimestamp"])),
        is_delivered=_parse_bool(record.get("isDelivered")),
    )


# =============================================================================
# IN-MEMORY
# =============================================================================

class InMemoryDataSource:
    """
    Serves a fixed snapshot held in memory.

    Lists are copied on every fetch, so callers can never alter the snapshot.
    """

    def __init__(
        self,
        drivers: Sequence[Driver],
        routes: Sequence[Route],
        orders: Sequence[Order]
    ) -> None:
        self.drivers: List[Driver] = list(drivers)
        self.routes: List[Route] = list(routes)
        self.orders: List[Order] = list(orders)

    def fetch_drivers(self, limit: int) -> List[Driver]:
        return self.drivers[:limit]

    def fetch_routes(self) -> List[Route]:
        return list(self.routes)

    def fetch_pending_orders(self) -> List[Order]:
        return [o for o in self.orders if not o.is_delivered]


# =============================================================================
# CSV FILES
# =============================================================================

class CsvDataSource:
    """
    Loads the snapshot from three CSV files.

    Expected columns:
        drivers: driverId, name, currentShiftHours, pastWeekHours
        routes:  routeId, distance, trafficLevel, baseTime
        orders:  orderId, value, assignedRoute, deliveryTimestamp[, isDelivered]

    Files are read on every fetch, so each run sees the current file contents.
    """

    def __init__(
        self,
        drivers_file: str = config.DEFAULT_DRIVERS_FILE,
        routes_file: str = config.DEFAULT_ROUTES_FILE,
        orders_file: str = config.DEFAULT_ORDERS_FILE
    ) -> None:
        self.drivers_file = drivers_file
        self.routes_file = routes_file
        self.orders_file = orders_file

    @staticmethod
    def _read_rows(path: str) -> List[Dict[str, str]]:
        """
        Read all rows of a CSV file.

        Raises:
            InfrastructureError: If the file does not exist or cannot be read
        """
        if not os.path.exists(path):
            raise InfrastructureError(f"Data file not found: {path}")
        try:
            with open(path, "r", newline="", encoding="utf-8") as f:
                return list(csv.DictReader(f))
        except OSError as e:
            raise InfrastructureError(f"Failed to read {path}: {e}") from e

    def _load(
        self,
        path: str,
        parse: Callable[[Mapping[str, Any]], T],
        limit: Optional[int] = None
    ) -> List[T]:
        """Parse the first limit rows of a file (all rows when limit is None)."""
        items: List[T] = []
        for line_no, row in enumerate(self._read_rows(path)[:limit], start=2):
            try:
                items.append(parse(row))
            except (KeyError, ValueError) as e:
                raise ValueError(f"Invalid data in {path} (line {line_no}): {e}") from e
        return items

    def fetch_drivers(self, limit: int) -> List[Driver]:
        return self._load(self.drivers_file, driver_from_record, limit)

    def fetch_routes(self) -> List[Route]:
        return self._load(self.routes_file, route_from_record)

    def fetch_pending_orders(self) -> List[Order]:
        orders = self._load(self.orders_file, order_from_record)
        return [o for o in orders if not o.is_delivered]


# =============================================================================
# BACK-OFFICE REST API
# =============================================================================

class BackofficeDataSource:
    """
    Pulls the snapshot from the back-office REST API.

    Responses use the envelope {"success": bool, "data": [...]}. Any transport
    or HTTP failure is raised as InfrastructureError; nothing is retried.
    """

    def __init__(
        self,
        base_url: str = config.BACKOFFICE_API_URL,
        token: Optional[str] = None,
        timeout: float = config.BACKOFFICE_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None
    ) -> None:
        base = base_url.rstrip("/")
        self.api_url = base if base.endswith("/api") else f"{base}/api"
        self.timeout = timeout
        self.session = session or requests.Session()
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
        url = f"{self.api_url}/{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.Timeout as e:
            logger.warning(f"Back-office request timed out: {url}")
            raise InfrastructureError(f"Request to {url} timed out") from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"Back-office request failed: {e}")
            raise InfrastructureError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise InfrastructureError(f"Invalid JSON from {url}: {e}") from e

        if not isinstance(payload, dict) or not payload.get("success", False):
            message = payload.get("message") if isinstance(payload, dict) else None
            raise InfrastructureError(f"Back-office error from {url}: {message or 'unknown error'}")

        return list(payload.get("data") or [])

    def fetch_drivers(self, limit: int) -> List[Driver]:
        records = self._get("drivers")
        return [driver_from_record(r) for r in records[:limit]]

    def fetch_routes(self) -> List[Route]:
        return [route_from_record(r) for r in self._get("routes")]

    def fetch_pending_orders(self) -> List[Order]:
        orders = [order_from_record(r) for r in self._get("orders", params={"status": "pending"})]
        return [o for o in orders if not o.is_delivered]
