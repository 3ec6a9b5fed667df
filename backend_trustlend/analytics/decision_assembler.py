"""
Decision assembler: engine judgment in, rubric terms out.

The scoring engine supplies the score and its narrative. Everything else
(block, tier, collateral, liquidation threshold, pricing) is recomputed here
from the rubric, so published terms always agree with the score. Drift in the
engine's own arithmetic is logged and overridden.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from backend_trustlend.ai_engine.response_parser import EngineDecision
from backend_trustlend.analytics.rubric import (
    EMPTY_PROFILE_SCORE_CEILING,
    RUBRIC_VERSION,
    TenorPrice,
    TrustTier,
    VolatilityBlock,
    classify_asset,
    clamp_score,
    liquidation_threshold_pct,
    normalize_asset,
    pricing_schedule,
    required_collateral_pct,
    tier_for_score,
)
from backend_trustlend.collectors import ReputationProfile
from backend_trustlend.trustlend_logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TrustDecision:
    score: int
    scoring_reasoning: str
    asset: str
    block: VolatilityBlock
    tier: TrustTier
    required_collateral_pct: float
    liquidation_threshold_pct: float | None
    pricing: tuple[TenorPrice, ...]
    rubric_version: str = RUBRIC_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "scoring_reasoning": self.scoring_reasoning,
            "asset": self.asset,
            "block": self.block.value,
            "block_label": self.block.label,
            "volatility_description": self.block.description,
            "tier": self.tier.value,
            "required_collateral_pct": self.required_collateral_pct,
            "liquidation_threshold_pct": self.liquidation_threshold_pct,
            "pricing": [p.to_dict() for p in self.pricing],
            "rubric_version": self.rubric_version,
        }


def terms_for_score(score: int, asset: str, reasoning: str = "") -> TrustDecision:
    """Pure rubric: derive every term from a (clamped) score and an asset identifier."""
    block = classify_asset(asset)
    score = clamp_score(score)
    tier = tier_for_score(score)
    return TrustDecision(
        score=score,
        scoring_reasoning=reasoning,
        asset=normalize_asset(asset),
        block=block,
        tier=tier,
        required_collateral_pct=required_collateral_pct(tier, block),
        liquidation_threshold_pct=liquidation_threshold_pct(block),
        pricing=pricing_schedule(tier),
    )


def _log_drift(engine: EngineDecision, decision: TrustDecision) -> None:
    reported = engine.underwriting_decision
    drift: dict[str, Any] = {}
    if reported.tier_number != decision.tier.number:
        drift["tier"] = (reported.trust_tier, decision.tier.value)
    if reported.required_collateral_percentage != decision.required_collateral_pct:
        drift["required_collateral_pct"] = (
            reported.required_collateral_percentage,
            decision.required_collateral_pct,
        )
    if reported.liquidation_threshold_percentage != decision.liquidation_threshold_pct:
        drift["liquidation_threshold_pct"] = (
            reported.liquidation_threshold_percentage,
            decision.liquidation_threshold_pct,
        )
    engine_prices = engine.pricing_array_percentages.by_tenor()
    for price in decision.pricing:
        if round(engine_prices[price.months], 4) != price.commission_pct:
            drift[f"price_{price.months}m"] = (engine_prices[price.months], price.commission_pct)
    if drift:
        logger.warning("engine_terms_drift", asset=decision.asset, score=decision.score, drift=drift)


def assemble_decision(
    engine: EngineDecision,
    asset: str,
    profile: ReputationProfile,
) -> TrustDecision:
    """Final decision: engine score and reasoning, rubric-derived terms."""
    score = clamp_score(engine.calculated_trust_score)
    if profile.is_empty and score > EMPTY_PROFILE_SCORE_CEILING:
        logger.warning(
            "empty_profile_score_capped",
            engine_score=score,
            ceiling=EMPTY_PROFILE_SCORE_CEILING,
        )
        score = EMPTY_PROFILE_SCORE_CEILING
    if score != engine.calculated_trust_score:
        logger.info("engine_score_adjusted", engine_score=engine.calculated_trust_score, score=score)
    decision = terms_for_score(score, asset, engine.scoring_reasoning)
    _log_drift(engine, decision)
    return decision
