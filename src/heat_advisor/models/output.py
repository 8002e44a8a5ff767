"""Presentation-facing output — what a survey front end renders."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from heat_advisor.models.results import Severity


OptionId = Literal["on_demand", "stored_vented", "stored_unvented", "ashp"]
ConfidenceLevel = Literal["high", "medium", "low"]


class EligibilityItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: OptionId
    label: str
    status: Literal["viable", "caution", "rejected"]
    reason: str | None = None


class RedFlagItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    severity: Severity
    title: str
    detail: str


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary: str


class Explainer(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    body: str


class EvidenceItem(BaseModel):
    """One fact the recommendation rests on, and how much to trust it."""

    model_config = ConfigDict(frozen=True)

    id: str
    field_path: str
    label: str
    value: str
    source: Literal["manual", "assumed", "placeholder", "derived"]
    confidence: ConfidenceLevel
    affects_option_ids: list[str]


class Assumption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    detail: str
    improve_by: str | None = None
    affects: list[str]
    severity: Literal["info", "warn"]


class Confidence(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: ConfidenceLevel
    reasons: list[str]


class OutputMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    engine_version: str
    contract_version: str
    confidence: Confidence
    assumptions: list[Assumption]


class VisualSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    type: Literal["timeline_24h", "pressure_drop", "ashp_flow", "space_footprint"]
    title: str
    data: dict[str, Any]
    affects_option_ids: list[str] = Field(default_factory=list)


class EngineOutput(BaseModel):
    model_config = ConfigDict(frozen=True)

    eligibility: list[EligibilityItem]
    red_flags: list[RedFlagItem]
    recommendation: Recommendation
    explainers: list[Explainer]
    evidence: list[EvidenceItem]
    context_summary: list[str]
    meta: OutputMeta
    visuals: list[VisualSpec]
