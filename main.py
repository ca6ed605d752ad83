#!/usr/bin/env python3
# delivery-sim/main.py
"""
Command-Line Interface for the Fleet Delivery Simulation.

Runs a simulation against CSV exports or the live back-office API and prints
the KPIs, driver assignments and order results.

Usage:
    python main.py                                      # Run with defaults (data/*.csv)
    python main.py --available-drivers 5 --start-time 09:30 --max-hours 8
    python main.py --api-url http://localhost:5000 --api-token TOKEN
    python main.py --json                               # Dump the raw result
    python main.py --status                             # Show what a run would see

Exit Codes:
    0: Success
    1: Invalid input or missing data (validation / not found)
    2: Data source error
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from typing import List, Optional

from delivery_sim import config
from delivery_sim.data_source import BackofficeDataSource, CsvDataSource, DataSource
from delivery_sim.exceptions import InfrastructureError, NotFoundError, ValidationError
from delivery_sim.models import SimulationInput, SimulationResult
from delivery_sim.simulation import Simulation


def print_header() -> None:
    """Print the CLI header."""
    print("\n" + "=" * 60)
    print("  FLEET DELIVERY SIMULATION")
    print("  Greedy Assignment with Fatigue and Hour Caps")
    print("=" * 60 + "\n")


def print_kpis(result: SimulationResult) -> None:
    """Print the fleet-level KPIs."""
    rows = [
        ("Total Profit", f"₹{result.total_profit:,.2f}"),
        ("Total Orders", result.total_orders),
        ("Efficiency Score", f"{result.efficiency_score:.2f}%"),
        ("On-Time Deliveries", result.on_time_deliveries),
        ("Late Deliveries", result.late_deliveries),
        ("Unassigned Orders", result.unassigned_orders),
        ("Fuel Cost", f"₹{result.fuel_cost:,.2f}"),
        ("Penalties", f"₹{result.penalties:,}"),
        ("Bonuses", f"₹{result.bonuses:,.2f}"),
    ]

    print("=" * 60)
    print("  KPIs")
    print("=" * 60)
    for label, value in rows:
        print(f"| {label:<25} | {str(value):>28} |")

    breakdown = ", ".join(f"{level}: ₹{cost:,.2f}" for level, cost in result.fuel_cost_by_traffic.items())
    print(f"\n  Fuel by traffic: {breakdown}")


def print_assignments(result: SimulationResult) -> None:
    """Print one row per driver."""
    print("\n" + "=" * 60)
    print("  DRIVER ASSIGNMENTS")
    print("=" * 60)
    print(f"| {'Driver':<18} | {'Orders':>6} | {'Hours':>6} | {'Km':>7} | {'Fatigued':<8} |")
    print("|" + "-" * 20 + "|" + "-" * 8 + "|" + "-" * 8 + "|" + "-" * 9 + "|" + "-" * 10 + "|")
    for a in result.driver_assignments:
        print(
            f"| {a.driver_name[:18]:<18} | {a.num_orders:>6} | {a.total_hours:>6.2f} | "
            f"{a.total_distance:>7.1f} | {'yes' if a.is_fatigued else 'no':<8} |"
        )


def print_order_results(result: SimulationResult) -> None:
    """Print one row per order."""
    print("\n" + "=" * 60)
    print("  ORDER RESULTS")
    print("=" * 60)
    print(f"| {'Order':<6} | {'Driver':<10} | {'Route':<5} | {'Status':<7} | {'Profit':>10} |")
    print("|" + "-" * 8 + "|" + "-" * 12 + "|" + "-" * 7 + "|" + "-" * 9 + "|" + "-" * 12 + "|")
    for r in result.order_results:
        print(
            f"| {r.order_id:<6} | {r.assigned_driver[:10]:<10} | {r.route_id:<5} | "
            f"{r.delivery_status.value:<7} | {r.profit:>10,.2f} |"
        )
    print("=" * 60 + "\n")


def build_source(args: argparse.Namespace) -> DataSource:
    """Pick the data source from the command-line arguments."""
    if args.api_url:
        return BackofficeDataSource(base_url=args.api_url, token=args.api_token)
    return CsvDataSource(args.drivers, args.routes, args.orders)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fleet Delivery Simulation CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                        # Default: data/*.csv, 5 drivers, 08:00, 10h
  python main.py -n 3 -t 07:30 -m 6                     # Smaller fleet, shorter day
  python main.py --run-date 2024-01-15 --json           # Fixed date, JSON output
  python main.py --api-url http://localhost:5000 --api-token $TOKEN
        """
    )

    parser.add_argument("--available-drivers", "-n", type=int, default=5,
                        help="Number of drivers to pull into the run (1-50, default: 5)")
    parser.add_argument("--start-time", "-t", type=str, default="08:00",
                        help="Shift start time as HH:MM (default: 08:00)")
    parser.add_argument("--max-hours", "-m", type=int, default=10,
                        help="Max hours per driver per day (1-24, default: 10)")
    parser.add_argument("--run-date", type=date.fromisoformat, default=None,
                        help="Date of the start time, YYYY-MM-DD (default: date of earliest deadline)")

    parser.add_argument("--drivers", default=config.DEFAULT_DRIVERS_FILE, help="Drivers CSV file")
    parser.add_argument("--routes", default=config.DEFAULT_ROUTES_FILE, help="Routes CSV file")
    parser.add_argument("--orders", default=config.DEFAULT_ORDERS_FILE, help="Orders CSV file")
    parser.add_argument("--api-url", default=None, help="Back-office API URL (overrides CSV files)")
    parser.add_argument("--api-token", default=None, help="Bearer token for the back-office API")

    parser.add_argument("--json", action="store_true", help="Print the raw result as JSON")
    parser.add_argument("--status", action="store_true", help="Show snapshot counts and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show detailed engine logging")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    simulation = Simulation(build_source(args))

    try:
        if args.status:
            print(json.dumps(simulation.get_status(), indent=2))
            return 0

        sim_input = SimulationInput(
            available_drivers=args.available_drivers,
            start_time=args.start_time,
            max_hours_per_day=args.max_hours,
            run_date=args.run_date,
        )
        result = simulation.run(sim_input)
    except (ValidationError, NotFoundError) as e:
        print(f"ERROR: {e}")
        return 1
    except (InfrastructureError, ValueError) as e:
        print(f"ERROR: Failed to load data: {e}")
        return 2

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return 0

    print_header()
    print_kpis(result)
    print_assignments(result)
    print_order_results(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
