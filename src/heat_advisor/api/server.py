"""FastAPI server — HTTP surface for the heat-advisor engine.

Run with:
    uvicorn heat_advisor.api.server:app --reload --port 8000

Or:
    heat-advisor-api

Endpoints:
    GET  /                  — welcome message and pointers
    GET  /health            — liveness check
    GET  /schema            — JSON Schema for SurveyInput
    GET  /survey/defaults   — complete default survey as JSON
    POST /engine/run        — run the engine on a partial or full survey

Each request runs the engine once; nothing is kept between requests.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError

from heat_advisor.config.survey import SurveyInput
from heat_advisor.engine.orchestrator import run_engine
from heat_advisor.engine.output import CONTRACT_VERSION, ENGINE_VERSION, build_engine_output

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# App setup
# ═══════════════════════════════════════════════════════════════════════════

app = FastAPI(
    title="Heat Advisor API",
    version=ENGINE_VERSION,
    description=(
        "Deterministic heating and hot-water recommendation from a property survey, "
        "with a 24-hour, 96-point comparison of two candidate systems. "
        "Start with GET /survey/defaults and POST the fields you know to /engine/run."
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ═══════════════════════════════════════════════════════════════════════════
# Request / response models
# ═══════════════════════════════════════════════════════════════════════════

class RunRequest(BaseModel):
    """Request body for /engine/run. All fields optional — defaults used for missing."""
    survey: dict[str, Any] = Field(
        default_factory=dict,
        description="Partial or full SurveyInput JSON. Missing fields use defaults. "
                    "Example: {'property': {'postcode': 'SW1A 1AA', 'heat_loss_kw': 9.5}}",
    )
    include_result: bool = Field(
        default=False,
        description="Also return the raw aggregate engine result",
    )


class RunResponse(BaseModel):
    """Response from /engine/run."""
    output: dict[str, Any]
    result: dict[str, Any] | None = None


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

def get_default_survey() -> dict[str, Any]:
    return SurveyInput().model_dump(mode="json")


def _deep_merge(base: dict, overrides: dict) -> dict:
    """Recursively merge overrides into base dict."""
    for key, val in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(val, dict):
            _deep_merge(base[key], val)
        else:
            base[key] = val
    return base


def _build_survey(overrides: dict[str, Any]) -> SurveyInput:
    """Build a SurveyInput from partial overrides merged onto defaults."""
    defaults = get_default_survey()
    _deep_merge(defaults, overrides)
    return SurveyInput(**defaults)


# ═══════════════════════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════════════════════

@app.get("/health")
def health_check():
    """Health check for deployment platforms."""
    return {"status": "ok"}


@app.get("/")
def root():
    """API root — returns a welcome message and pointers."""
    return {
        "name": "Heat Advisor API",
        "engine_version": ENGINE_VERSION,
        "contract_version": CONTRACT_VERSION,
        "start_here": "GET /survey/defaults",
        "docs": "GET /docs (interactive Swagger UI)",
    }


@app.get("/schema")
def get_schema():
    """Full JSON Schema for SurveyInput — every field with types, defaults, constraints."""
    return SurveyInput.model_json_schema()


@app.get("/survey/defaults")
def get_defaults():
    """Complete default survey as JSON. Use as a starting point for modifications."""
    return get_default_survey()


@app.post("/engine/run", response_model=RunResponse)
def engine_run(req: RunRequest):
    """Run the engine on a partial or full survey.

    Invalid surveys are rejected with 422 and pydantic's error list.
    """
    try:
        survey = _build_survey(req.survey)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False))

    result = run_engine(survey)
    output = build_engine_output(result, survey)
    logger.info(
        "engine run: confidence=%s primary=%r",
        output.meta.confidence.level, output.recommendation.primary,
    )
    return RunResponse(
        output=output.model_dump(mode="json"),
        result=result.model_dump(mode="json") if req.include_result else None,
    )


# ═══════════════════════════════════════════════════════════════════════════
# CLI entry point
# ═══════════════════════════════════════════════════════════════════════════

def main():
    """Run the API server."""
    import uvicorn
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(
        "heat_advisor.api.server:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
