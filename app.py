"""
Fleet Delivery Simulation - Operations Dashboard
================================================

Dashboard for running delivery simulations and reviewing their KPIs.

Features:
- Snapshot overview (drivers, routes, pending orders)
- Configurable simulation parameters
- KPI cards, delivery and cost breakdown charts
- Driver assignment and order result tables
"""

import streamlit as st
import pandas as pd
from datetime import date
from typing import Any, Dict, Optional

from delivery_sim import config
from delivery_sim.data_source import BackofficeDataSource, CsvDataSource, DataSource
from delivery_sim.exceptions import InfrastructureError, SimulationError
from delivery_sim.models import SimulationInput, SimulationResult
from delivery_sim.simulation import Simulation

# =============================================================================
# PAGE CONFIG
# =============================================================================

st.set_page_config(
    page_title="Fleet Delivery Simulation",
    page_icon="🚚",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .kpi-card {
        background: linear-gradient(135deg, #7c3aed 0%, #4f46e5 100%);
        border-radius: 12px;
        padding: 1.25rem;
        color: white;
        text-align: center;
    }
    .kpi-card.green { background: linear-gradient(135deg, #059669 0%, #10b981 100%); }
    .kpi-card.red { background: linear-gradient(135deg, #dc2626 0%, #f97316 100%); }
    .kpi-value { font-size: 2rem; font-weight: 800; margin: 0.4rem 0; }
    .kpi-label { font-size: 0.85rem; opacity: 0.9; text-transform: uppercase; letter-spacing: 1px; }
    .section-header {
        font-size: 1.4rem;
        font-weight: 700;
        margin: 1.5rem 0 0.75rem 0;
        padding-bottom: 0.4rem;
        border-bottom: 3px solid #7c3aed;
    }
</style>
""", unsafe_allow_html=True)


# =============================================================================
# DATA SOURCE
# =============================================================================

def build_source(source_kind: str, api_url: str, api_token: str) -> DataSource:
    """Create the data source selected in the sidebar."""
    if source_kind == "Back-office API":
        return BackofficeDataSource(base_url=api_url, token=api_token or None)
    return CsvDataSource()


def run_simulation(source: DataSource, sim_input: SimulationInput) -> SimulationResult:
    """Run a simulation against the given source."""
    return Simulation(source).run(sim_input)


# =============================================================================
# SIDEBAR
# =============================================================================

def render_sidebar() -> Dict[str, Any]:
    """Render the sidebar configuration panel and return the chosen settings."""
    st.sidebar.markdown("## 🎛️ Configuration")
    st.sidebar.markdown("---")

    st.sidebar.markdown("### 📊 Data Source")
    source_kind = st.sidebar.radio("Source", options=["CSV files", "Back-office API"], index=0)
    api_url = config.BACKOFFICE_API_URL
    api_token = ""
    if source_kind == "Back-office API":
        api_url = st.sidebar.text_input("API URL", value=config.BACKOFFICE_API_URL)
        api_token = st.sidebar.text_input("Access token", type="password")

    st.sidebar.markdown("---")
    st.sidebar.markdown("### ⚙️ Parameters")

    available_drivers = st.sidebar.slider(
        "Available Drivers",
        min_value=config.MIN_AVAILABLE_DRIVERS,
        max_value=config.MAX_AVAILABLE_DRIVERS,
        value=5,
        help="Number of drivers pulled into the run"
    )

    start_time = st.sidebar.text_input(
        "Start Time (HH:MM)",
        value="08:00",
        help="Shift start on a 24-hour clock"
    )

    max_hours = st.sidebar.slider(
        "Max Hours per Driver per Day",
        min_value=config.MIN_HOURS_PER_DAY,
        max_value=config.MAX_HOURS_PER_DAY,
        value=10,
    )

    use_run_date = st.sidebar.checkbox(
        "Fix run date",
        value=False,
        help="By default the start time falls on the date of the earliest pending deadline"
    )
    run_date: Optional[date] = st.sidebar.date_input("Run date") if use_run_date else None

    st.sidebar.markdown("---")
    run_clicked = st.sidebar.button("🚚 Run Simulation", use_container_width=True)

    return {
        "run": run_clicked,
        "source": build_source(source_kind, api_url, api_token),
        "input": SimulationInput(
            available_drivers=available_drivers,
            start_time=start_time,
            max_hours_per_day=max_hours,
            run_date=run_date,
        ),
    }


# =============================================================================
# KPI DISPLAY
# =============================================================================

def render_status(source: DataSource) -> None:
    """Render snapshot counts for the selected data source."""
    try:
        status = Simulation(source).get_status()
    except (InfrastructureError, ValueError) as e:
        st.warning(f"Data source unavailable: {e}")
        return

    col1, col2, col3 = st.columns(3)
    col1.metric("Drivers", status["availableDrivers"])
    col2.metric("Routes", status["totalRoutes"])
    col3.metric("Pending Orders", status["pendingOrders"])


def render_kpi_row(result: SimulationResult) -> None:
    """Render the top KPI cards."""
    cards = [
        ("", "Total Profit", f"₹{result.total_profit:,.0f}"),
        ("green", "Efficiency Score", f"{result.efficiency_score:.1f}%"),
        ("green", "On-Time Deliveries", result.on_time_deliveries),
        ("red", "Late Deliveries", result.late_deliveries),
    ]
    for col, (style, label, value) in zip(st.columns(len(cards)), cards):
        with col:
            st.markdown(f"""
            <div class="kpi-card {style}">
                <div class="kpi-label">{label}</div>
                <div class="kpi-value">{value}</div>
            </div>
            """, unsafe_allow_html=True)


def render_charts(result: SimulationResult) -> None:
    """Render delivery outcome and cost breakdown charts."""
    col1, col2, col3 = st.columns(3)

    with col1:
        st.markdown("**Delivery Outcome**")
        outcome = pd.DataFrame(
            {"Orders": [result.on_time_deliveries, result.late_deliveries]},
            index=["On Time", "Late"],
        )
        st.bar_chart(outcome)

    with col2:
        st.markdown("**Cost Breakdown (₹)**")
        costs = pd.DataFrame(
            {"Amount": [result.fuel_cost, result.penalties, result.bonuses]},
            index=["Fuel Cost", "Penalties", "Bonuses"],
        )
        st.bar_chart(costs)

    with col3:
        st.markdown("**Fuel Cost by Traffic (₹)**")
        fuel = pd.DataFrame.from_dict(result.fuel_cost_by_traffic, orient="index", columns=["Fuel Cost"])
        st.bar_chart(fuel)


# =============================================================================
# TABLES
# =============================================================================

def assignments_frame(result: SimulationResult) -> pd.DataFrame:
    """One row per driver."""
    return pd.DataFrame([
        {
            "Driver": a.driver_name,
            "Orders": a.num_orders,
            "Order IDs": ", ".join(a.assigned_orders),
            "Hours": round(a.total_hours, 2),
            "Distance (km)": round(a.total_distance, 1),
            "Fatigued": "Yes" if a.is_fatigued else "No",
        }
        for a in result.driver_assignments
    ])


def orders_frame(result: SimulationResult) -> pd.DataFrame:
    """One row per order."""
    return pd.DataFrame([
        {
            "Order": r.order_id,
            "Driver": r.assigned_driver,
            "Route": r.route_id,
            "Value": r.order_value,
            "Delivery": r.delivery_time.strftime("%H:%M"),
            "Status": r.delivery_status.value,
            "Fuel": r.fuel_cost,
            "Penalty": r.penalty,
            "Bonus": r.bonus,
            "Profit": r.profit,
        }
        for r in result.order_results
    ])


def render_tables(result: SimulationResult) -> None:
    """Render the driver assignment and order result tables."""
    st.markdown('<div class="section-header">👥 Driver Assignments</div>', unsafe_allow_html=True)
    st.dataframe(assignments_frame(result), use_container_width=True, hide_index=True)

    st.markdown('<div class="section-header">📦 Order Results</div>', unsafe_allow_html=True)

    def highlight_late(row):
        """Tint late orders red and unassigned orders grey."""
        if row["Driver"] == "unassigned":
            return ["background-color: #f3f4f6"] * len(row)
        if row["Status"] == "Late":
            return ["background-color: #fde2e2"] * len(row)
        return [""] * len(row)

    styled_df = orders_frame(result).style.apply(highlight_late, axis=1).format({
        "Value": "{:,.0f}",
        "Fuel": "{:,.2f}",
        "Bonus": "{:,.2f}",
        "Profit": "{:,.2f}",
    })
    st.dataframe(styled_df, use_container_width=True, hide_index=True)


def render_explainer() -> None:
    """Render the company rules section."""
    with st.expander("Company Rules", expanded=False):
        st.markdown(f"""
        - Orders are assigned Earliest-Deadline-First to the best-scoring driver with hours left
        - Drivers on shift for more than {config.FATIGUE_THRESHOLD_HOURS:g} hours are
          {round((config.FATIGUE_SLOWDOWN - 1) * 100)}% slower
        - Fuel: ₹{config.FUEL_COST_PER_KM:g}/km, plus ₹{config.HIGH_TRAFFIC_SURCHARGE_PER_KM:g}/km in High traffic
        - Late delivery penalty: ₹{config.LATE_DELIVERY_PENALTY}
        - Orders above ₹{config.HIGH_VALUE_THRESHOLD:,.0f} delivered on time earn a
          {round(config.HIGH_VALUE_BONUS_RATE * 100)}% bonus
        """)


# =============================================================================
# MAIN APPLICATION
# =============================================================================

def main():
    """Main application entry point."""
    st.title("🚚 Fleet Delivery Simulation")
    st.caption("Simulate a day of deliveries and review profit, on-time performance and driver load")

    settings = render_sidebar()
    render_status(settings["source"])

    if settings["run"]:
        try:
            with st.spinner("Running simulation..."):
                st.session_state["simulation_result"] = run_simulation(settings["source"], settings["input"])
        except InfrastructureError as e:
            st.error(f"Failed to load data: {e}")
            return
        except (SimulationError, ValueError) as e:
            st.error(str(e))
            return

    result: Optional[SimulationResult] = st.session_state.get("simulation_result")
    if result is None:
        st.info("👈 Set the parameters in the sidebar, then click **Run Simulation**.")
        render_explainer()
        return

    render_kpi_row(result)
    st.markdown('<div class="section-header">📈 Breakdown</div>', unsafe_allow_html=True)
    render_charts(result)
    render_tables(result)
    render_explainer()


if __name__ == "__main__":
    main()
