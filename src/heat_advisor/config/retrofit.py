"""Retrofit appetite."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class RetrofitConfig(BaseModel):
    """How far the householder is willing to go."""

    model_config = ConfigDict(frozen=True)

    emitter_upgrade_appetite: Literal["none", "some", "full_job"] = Field(
        default="none",
        description="'full_job' = all emitters resized (35 °C flow), "
                    "'some' = partial upgrade (45 °C), 'none' = keep radiators (50 °C)",
    )
