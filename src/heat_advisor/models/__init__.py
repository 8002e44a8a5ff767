"""Result models — engine and presentation output contracts."""

from heat_advisor.models.results import (
    EngineResult,
    Flag,
    LifestyleResult,
    NormalizedFacts,
)
from heat_advisor.models.timeline import (
    Band,
    DemandEvent,
    DhwEventEntry,
    Series,
    TimelinePayload,
)
from heat_advisor.models.output import EngineOutput

__all__ = [
    "EngineResult",
    "Flag",
    "LifestyleResult",
    "NormalizedFacts",
    "Band",
    "DemandEvent",
    "DhwEventEntry",
    "Series",
    "TimelinePayload",
    "EngineOutput",
]
