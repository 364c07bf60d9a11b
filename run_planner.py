"""
Main Execution Script for the Breeding Timeline Engine.
Loads (or generates) a demo portfolio, runs the engine end to end,
prints a report and exports dashboard data for a calendar frontend.
"""

import os
import sys
import logging
from datetime import date
import json

# Add current directory to path so imports work
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from generators.data_factory import DataGenerator
from engine.aggregator import PlanWindowAggregator
from engine.horizon import default_horizon
from engine.planner import CyclePlanner
from engine.calendar import to_calendar_events
from models import PlanRow, ReproEvent, AvailabilityPrefs

# Configure logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger("Main")

# --- CONFIGURATION ---
CACHE_FILENAME = "debug_data.json"
USE_CACHE = True  # Set to False to force new AI generation
DASHBOARD_FILENAME = "dashboard_data.json"
HORIZON_MONTHS = 12
API_KEY = os.environ.get("GOOGLE_API_KEY")
# ---------------------


def save_debug_data(plans, histories, filename: str):
    """Save generated fixtures so we don't re-query the LLM every time."""
    serializable = {
        "plans": [p.model_dump(mode='json') for p in plans],
        "histories": {
            pid: [e.model_dump(mode='json') for e in events] for pid, events in histories.items()
        },
    }
    with open(filename, 'w') as f:
        json.dump(serializable, f, indent=2)
    logger.info(f"Saved debug data to {filename}")


def load_cached_data(filename: str):
    """Load JSON fixtures and re-hydrate the pydantic models."""
    try:
        with open(filename, 'r') as f:
            data = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        logger.warning(f"Cache file {filename} not found or invalid. Falling back to Generator.")
        return None, None

    logger.info(f"Loading cached data from {filename}...")
    plans = [PlanRow(**item) for item in data.get('plans', [])]
    histories = {
        pid: [ReproEvent(**e) for e in events] for pid, events in data.get('histories', {}).items()
    }
    logger.info(f"Cache Loaded: {len(plans)} plans, {len(histories)} histories.")
    return plans, histories


def export_dashboard_data(state, projections, filename=DASHBOARD_FILENAME):
    """
    Serializes the portfolio state into a JSON format for the frontend.
    """
    logger.info(f"Exporting dashboard data to {filename}...")

    data = {
        "horizon": state.horizon.model_dump(mode='json') if state.horizon else None,
        "plans": {},
        "events": [e.model_dump(mode='json') for e in to_calendar_events(state.rows, state.bands)],
        "projections": projections,
        "failures": state.get_failure_report(),
    }

    # Per-plan rows and bands
    for pid in state.plan_ids:
        data["plans"][pid] = {
            "rows": [r.model_dump(mode='json') for r in state.rows_by_plan.get(pid, [])],
            "bands": [b.model_dump(mode='json') for b in state.bands_by_plan.get(pid, [])],
        }

    with open(filename, 'w') as f:
        json.dump(data, f, indent=2)
    logger.info("Dashboard data exported.")


def main():
    if not API_KEY and not USE_CACHE:
        logger.error("GOOGLE_API_KEY not found. Please set it via 'export GOOGLE_API_KEY=...'")
        return

    logger.info("Starting Breeding Timeline Engine Integration Run...")
    today = date.today()

    plans, histories = [], {}

    # --- PHASE 1: DATA ACQUISITION (Cache vs. GenAI) ---
    if USE_CACHE:
        plans, histories = load_cached_data(CACHE_FILENAME)

    if not plans:
        if not API_KEY:
            logger.error("No cached data and no GOOGLE_API_KEY. Exiting.")
            return
        generator = DataGenerator(api_key=API_KEY)
        logger.info("--- Phase 1: Generative AI Data Fetch ---")

        plans, cost_plans = generator.generate_breeding_portfolio(count=12, start_date=today)
        histories, cost_hist = generator.generate_heat_histories([p.id for p in plans], start_date=today)
        logger.info(f"Total Estimated LLM Cost: ${cost_plans + cost_hist:.4f}")

        save_debug_data(plans, histories, CACHE_FILENAME)

    if not plans:
        logger.error("No data available. Exiting.")
        return

    # --- PHASE 2: PORTFOLIO ---
    logger.info("--- Phase 2: Portfolio Windows & Bands ---")
    aggregator = PlanWindowAggregator(prefs=AvailabilityPrefs())
    state = aggregator.build_portfolio(plans, default_horizon(today, HORIZON_MONTHS))

    # --- PHASE 3: PER-FEMALE PROJECTIONS ---
    logger.info("--- Phase 3: Cycle Projections ---")
    projections = {}
    for plan in plans:
        planner = CyclePlanner(plan.species, histories.get(plan.id, []), future_count=4, today=today)
        resolution = planner.resolution
        projections[plan.id] = {
            "cycle_length_days": resolution.days,
            "source": resolution.source.value,
            "warning_conflict": resolution.warning_conflict,
            "next_cycles": [c.date.isoformat() for c in planner.projected_cycles],
        }

    # --- PHASE 4: REPORTING ---
    stats = state.get_statistics()

    print("\n" + "=" * 50)
    print("FINAL EXECUTION REPORT")
    print("=" * 50)
    print(stats)

    if state.faults:
        print("\nDEGRADED PLANS")
        for fault in state.get_failure_report():
            print(f"[{fault['plan_id']}] {', '.join(fault['stages'])}")
            print(f"   Reason: {fault['latest_reason']}")

    # --- PHASE 5: EXPORT FOR FRONTEND ---
    export_dashboard_data(state, projections, DASHBOARD_FILENAME)

    print("\nIntegration Run Complete.")


if __name__ == "__main__":
    main()
