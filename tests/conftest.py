import random
from datetime import datetime, timezone

import pytest

from delivery_sim.data_source import InMemoryDataSource
from delivery_sim.models import Driver, Order, Route, SimulationInput, TrafficLevel


def make_driver(driver_id="D001", shift=6, past_week=35, name=None):
    return Driver(
        driver_id=driver_id,
        name=name or f"Driver {driver_id}",
        current_shift_hours=shift,
        past_week_hours=past_week,
    )


def make_route(route_id="R001", distance=25, traffic=TrafficLevel.MEDIUM, base_time=45):
    return Route(route_id=route_id, distance=distance, traffic_level=traffic, base_time=base_time)


def at(hour, minute=0, day=15):
    """Deadline on 2024-01-<day> in UTC."""
    return datetime(2024, 1, day, hour, minute, tzinfo=timezone.utc)


def make_order(order_id="O001", value=1500, route_id="R001", deadline=None, delivered=False):
    return Order(
        order_id=order_id,
        value=value,
        assigned_route_id=route_id,
        delivery_deadline=deadline or at(12),
        is_delivered=delivered,
    )


def make_input(drivers=1, start="08:00", max_hours=10, run_date=None):
    return SimulationInput(
        available_drivers=drivers,
        start_time=start,
        max_hours_per_day=max_hours,
        run_date=run_date,
    )


@pytest.fixture
def scenario_a_source():
    """One rested driver, one Medium route, one high-value order due at noon."""
    return InMemoryDataSource(
        drivers=[make_driver("D001", shift=6, past_week=35)],
        routes=[make_route("R001", distance=25, traffic=TrafficLevel.MEDIUM, base_time=45)],
        orders=[make_order("O001", value=1500, route_id="R001", deadline=at(12))],
    )


@pytest.fixture
def scenario_b_source():
    """One fatigued driver on a Low traffic route."""
    return InMemoryDataSource(
        drivers=[make_driver("D001", shift=9, past_week=40)],
        routes=[make_route("R001", distance=20, traffic=TrafficLevel.LOW, base_time=30)],
        orders=[make_order("O001", value=1000, route_id="R001", deadline=at(10))],
    )


@pytest.fixture
def scenario_c_source():
    """A High traffic route that cannot make a 09:00 deadline."""
    return InMemoryDataSource(
        drivers=[make_driver("D001", shift=6, past_week=35)],
        routes=[make_route("R001", distance=50, traffic=TrafficLevel.HIGH, base_time=60)],
        orders=[make_order("O001", value=800, route_id="R001", deadline=at(9))],
    )


@pytest.fixture
def random_fleet():
    """A seeded mid-sized snapshot: 8 drivers, 6 routes, 60 orders."""
    rng = random.Random(7)
    levels = list(TrafficLevel)
    drivers = [make_driver(f"D{i:03d}", shift=rng.choice([2, 5, 8, 9, 11])) for i in range(8)]
    routes = [
        make_route(f"R{i:03d}", distance=rng.randint(5, 60), traffic=rng.choice(levels),
                   base_time=rng.randint(10, 120))
        for i in range(6)
    ]
    orders = [
        make_order(f"O{i:03d}", value=rng.randint(100, 5000), route_id=rng.choice(routes).route_id,
                   deadline=at(rng.randint(8, 20), rng.choice([0, 15, 30, 45])))
        for i in range(60)
    ]
    return drivers, routes, orders
