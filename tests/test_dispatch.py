from datetime import datetime

import pytest

from delivery_sim import economics
from delivery_sim.dispatch import AssignmentEngine, sort_by_deadline
from delivery_sim.models import DriverAssignment, TrafficLevel
from delivery_sim.scoring import calculate_driver_score, can_handle_order

from conftest import at, make_driver, make_order, make_route


@pytest.fixture
def engine():
    return AssignmentEngine()


def _by_id(assignments):
    return {a.driver_id: a for a in assignments}


# Scoring

def test_fresh_rested_driver_scores_100():
    assert calculate_driver_score(DriverAssignment("D1", "A", is_fatigued=False)) == 100


def test_fatigued_driver_scores_70():
    assert calculate_driver_score(DriverAssignment("D1", "A", is_fatigued=True)) == 70


def test_score_accounts_for_orders_and_distance():
    assignment = DriverAssignment("D1", "A", is_fatigued=False,
                                  assigned_orders=["O1", "O2"], total_distance=45)
    assert calculate_driver_score(assignment) == pytest.approx(85.5)


def test_score_is_floored_at_zero():
    assignment = DriverAssignment("D1", "A", is_fatigued=True,
                                  assigned_orders=["O"] * 20, total_distance=300)
    assert calculate_driver_score(assignment) == 0


def test_can_handle_order_is_boundary_inclusive():
    route = make_route(traffic=TrafficLevel.LOW, base_time=30)
    assignment = DriverAssignment("D1", "A", is_fatigued=False, total_hours=0.5)
    assert can_handle_order(assignment, route, max_hours_per_day=1)
    assignment.total_hours = 0.75
    assert not can_handle_order(assignment, route, max_hours_per_day=1)


# Ordering

def test_sort_by_deadline_is_stable():
    orders = [
        make_order("O1", deadline=at(11)),
        make_order("O2", deadline=at(9)),
        make_order("O3", deadline=at(11)),
        make_order("O4", deadline=at(9)),
    ]
    assert [o.order_id for o in sort_by_deadline(orders)] == ["O2", "O4", "O1", "O3"]


def test_naive_deadlines_sort_as_utc():
    orders = [
        make_order("O1", deadline=datetime(2024, 1, 15, 12, 0)),
        make_order("O2", deadline=at(11)),
        make_order("O3", deadline=datetime(2024, 1, 15, 11, 0)),
    ]
    assert [o.order_id for o in sort_by_deadline(orders)] == ["O2", "O3", "O1"]


def test_mixed_naive_and_aware_deadlines_are_assigned(engine):
    orders = [make_order("O1", deadline=datetime(2024, 1, 15, 12, 0)), make_order("O2", deadline=at(11))]
    [assignment] = engine.assign([make_driver("D1")], orders, [make_route()], max_hours_per_day=10)
    assert assignment.assigned_orders == ["O2", "O1"]


def test_orders_are_assigned_earliest_deadline_first(engine):
    route = make_route(traffic=TrafficLevel.LOW, base_time=10)
    orders = [
        make_order("O1", deadline=at(12)),
        make_order("O2", deadline=at(9)),
        make_order("O3", deadline=at(10)),
    ]
    [assignment] = engine.assign([make_driver("D1")], orders, [route], max_hours_per_day=10)
    assert assignment.assigned_orders == ["O2", "O3", "O1"]


# Driver selection

def test_rested_driver_beats_fatigued_driver(engine):
    drivers = [make_driver("D1", shift=9), make_driver("D2", shift=4)]
    assignments = engine.assign(drivers, [make_order("O1")], [make_route()], max_hours_per_day=10)
    assert _by_id(assignments)["D2"].assigned_orders == ["O1"]
    assert _by_id(assignments)["D1"].assigned_orders == []


def test_first_driver_wins_ties(engine):
    drivers = [make_driver("D1"), make_driver("D2")]
    route = make_route(distance=10, traffic=TrafficLevel.LOW, base_time=30)
    orders = [
        make_order("O1", deadline=at(9)),
        make_order("O2", deadline=at(10)),
        make_order("O3", deadline=at(11)),
    ]
    assignments = _by_id(engine.assign(drivers, orders, [route], max_hours_per_day=10))
    assert assignments["D1"].assigned_orders == ["O1", "O3"]
    assert assignments["D2"].assigned_orders == ["O2"]


def test_zero_score_driver_still_receives_orders(engine):
    route = make_route(distance=1, traffic=TrafficLevel.LOW, base_time=1)
    orders = [make_order(f"O{i:02d}", deadline=at(9, i)) for i in range(25)]
    [assignment] = engine.assign([make_driver("D1", shift=10)], orders, [route], max_hours_per_day=24)
    assert assignment.num_orders == 25


def test_fatigue_flag_is_fixed_at_start(engine):
    drivers = [make_driver("D1", shift=8), make_driver("D2", shift=8.5)]
    assignments = _by_id(engine.assign(drivers, [make_order("O1")], [make_route()], max_hours_per_day=10))
    assert assignments["D1"].is_fatigued is False
    assert assignments["D2"].is_fatigued is True


# Hour cap

def test_orders_beyond_the_hour_cap_stay_unassigned(engine):
    route = make_route(traffic=TrafficLevel.LOW, base_time=30)
    orders = [make_order(f"O{i}", deadline=at(9 + i)) for i in range(3)]
    [assignment] = engine.assign([make_driver("D1")], orders, [route], max_hours_per_day=1)
    assert assignment.assigned_orders == ["O0", "O1"]
    assert assignment.total_hours == 1.0


def test_hour_cap_holds_for_every_driver(engine, random_fleet):
    drivers, routes, orders = random_fleet
    route_map = {r.route_id: r for r in routes}
    for cap in (1, 3, 8):
        assignments = engine.assign(drivers, orders, routes, max_hours_per_day=cap)
        for assignment in assignments:
            charged = sum(economics.adjusted_hours(route_map[o.assigned_route_id])
                          for o in orders if o.order_id in assignment.assigned_orders)
            assert charged <= cap + 1e-9
            assert assignment.total_hours == pytest.approx(charged)


def test_each_order_is_assigned_at_most_once(engine, random_fleet):
    drivers, routes, orders = random_fleet
    assignments = engine.assign(drivers, orders, routes, max_hours_per_day=4)
    assigned = [order_id for a in assignments for order_id in a.assigned_orders]
    assert len(assigned) == len(set(assigned))


def test_distance_accumulates(engine):
    route = make_route(distance=12.5, traffic=TrafficLevel.LOW, base_time=10)
    orders = [make_order("O1", deadline=at(9)), make_order("O2", deadline=at(10))]
    [assignment] = engine.assign([make_driver("D1")], orders, [route], max_hours_per_day=10)
    assert assignment.total_distance == 25


# Robustness

def test_unknown_route_is_skipped(engine):
    orders = [make_order("O1", route_id="R404", deadline=at(9)), make_order("O2", deadline=at(10))]
    [assignment] = engine.assign([make_driver("D1")], orders, [make_route()], max_hours_per_day=10)
    assert assignment.assigned_orders == ["O2"]


def test_assignments_follow_fleet_order(engine):
    drivers = [make_driver("D3"), make_driver("D1"), make_driver("D2")]
    assignments = engine.assign(drivers, [], [make_route()], max_hours_per_day=10)
    assert [a.driver_id for a in assignments] == ["D3", "D1", "D2"]
    assert all(a.num_orders == 0 for a in assignments)


def test_inputs_are_not_mutated(engine):
    drivers = [make_driver("D1"), make_driver("D2")]
    orders = [make_order("O1", deadline=at(12)), make_order("O2", deadline=at(9))]
    routes = [make_route()]
    before = (list(drivers), list(orders), list(routes))
    engine.assign(drivers, orders, routes, max_hours_per_day=10)
    assert (drivers, orders, routes) == before


def test_repeated_runs_are_identical(engine, random_fleet):
    drivers, routes, orders = random_fleet
    first = engine.assign(drivers, orders, routes, max_hours_per_day=6)
    second = engine.assign(drivers, orders, routes, max_hours_per_day=6)
    assert [a.to_dict() for a in first] == [a.to_dict() for a in second]
