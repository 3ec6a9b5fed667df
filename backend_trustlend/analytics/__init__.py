"""
TrustLend analytics: rubric, profile aggregation and decision assembly.

Modules: rubric, profile_aggregator, decision_assembler, underwriting_pipeline.
The pipeline is imported from its module to keep this package light.
"""

from backend_trustlend.analytics.rubric import (
    TrustTier,
    VolatilityBlock,
    classify_asset,
    clamp_score,
    pricing_schedule,
    tier_for_score,
)
from backend_trustlend.analytics.profile_aggregator import aggregate_profile
from backend_trustlend.analytics.decision_assembler import (
    TrustDecision,
    assemble_decision,
    terms_for_score,
)

__all__ = [
    "TrustDecision",
    "TrustTier",
    "VolatilityBlock",
    "aggregate_profile",
    "assemble_decision",
    "classify_asset",
    "clamp_score",
    "pricing_schedule",
    "terms_for_score",
    "tier_for_score",
]
