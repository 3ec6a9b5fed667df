"""
Validator for the scoring engine's JSON reply.

The reply must match the decision schema the rubric instruction asks for.
Missing or malformed fields raise UpstreamContractViolation carrying the raw
reply text; nothing is defaulted.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from backend_trustlend.core.exceptions import UpstreamContractViolation


class AssetClassification(BaseModel):
    model_config = ConfigDict(extra="ignore")

    block: str
    volatility_description: str = ""


class UnderwritingTerms(BaseModel):
    model_config = ConfigDict(extra="ignore")

    trust_tier: str | int
    required_collateral_percentage: float
    liquidation_threshold_percentage: float | None = None

    @property
    def tier_number(self) -> int | None:
        """Tier as reported by the engine ("Tier 2", "2", 2 -> 2); None if unreadable."""
        match = re.search(r"[123]", str(self.trust_tier))
        return int(match.group()) if match else None


class PricingArray(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    one_month: float = Field(alias="1_month")
    three_month: float = Field(alias="3_month")
    six_month: float = Field(alias="6_month")
    twelve_month: float = Field(alias="12_month")

    def by_tenor(self) -> dict[int, float]:
        return {1: self.one_month, 3: self.three_month, 6: self.six_month, 12: self.twelve_month}


class EngineDecision(BaseModel):
    """Scoring engine reply. Only score and reasoning are trusted downstream."""

    model_config = ConfigDict(extra="ignore")

    calculated_trust_score: float = Field(allow_inf_nan=False)
    scoring_reasoning: str = Field(min_length=1)
    asset_classification: AssetClassification
    underwriting_decision: UnderwritingTerms
    pricing_array_percentages: PricingArray

    @field_validator("calculated_trust_score", mode="before")
    @classmethod
    def _numeric_score(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("score must be a number, not a boolean")
        if isinstance(value, str):
            return value.strip()
        return value


def parse_engine_decision(obj: dict[str, Any], raw_text: str | None = None) -> EngineDecision:
    """Validate the extracted JSON object against the decision schema."""
    try:
        return EngineDecision.model_validate(obj)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise UpstreamContractViolation(
            f"Scoring engine reply violates the decision schema ({problems})",
            raw_text=raw_text,
        ) from e
