"""Engine — survey normalisation, calculation modules, 24h timeline and output."""

from heat_advisor.engine.normalizer import normalize
from heat_advisor.engine.lifestyle import simulate_lifestyle
from heat_advisor.engine.events import DEFAULT_EVENTS, generate_events_from_profile
from heat_advisor.engine.solver import solve_day
from heat_advisor.engine.timeline import build_timeline, resample_hourly_demand
from heat_advisor.engine.assumptions import build_assumptions
from heat_advisor.engine.orchestrator import run_engine
from heat_advisor.engine.output import build_engine_output

__all__ = [
    "normalize",
    "simulate_lifestyle",
    "DEFAULT_EVENTS",
    "generate_events_from_profile",
    "solve_day",
    "build_timeline",
    "resample_hourly_demand",
    "build_assumptions",
    "run_engine",
    "build_engine_output",
]
