"""
Decision prompt builder.

The system message is the fixed, versioned scoring rubric plus the exact JSON
reply schema. The user message is the serialized profile, the requested
collateral asset and a request timestamp.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from backend_trustlend.analytics.rubric import RUBRIC_VERSION
from backend_trustlend.collectors import ReputationProfile
from backend_trustlend.config import Settings

RUBRIC_INSTRUCTION = f"""UNDERWRITING DIRECTIVE ({RUBRIC_VERSION})
You are the risk officer of an asset-backed lending desk. You receive a borrower's
on-chain wallet data, Web2 identity data (developer history, Q&A reputation, a declared
social attestation) and the collateral asset they want to pledge.

STEP 1: TRUST SCORE (range 300-850)
Start from a base score of 500 and apply:
- On-chain liquidation history: any past forced liquidation of the wallet, subtract 200.
- Wallet age and volume: add up to 100 for wallets older than 1 year with consistent volume.
- Verified social identity: add 100 for a verified social profile with more than 100
  connections or a Q&A account with more than 500 reputation.
- Developer proof: add 100 for a developer account older than 2 years with active
  contributions in the last 6 months.
- Empty profile: if the Web2 data is missing or empty, subtract 100 (sybil / bot risk).
Cap the final score at 850 and floor it at 300.

STEP 2: ASSET VOLATILITY
- Block I (low): global index ETFs, sovereign AAA bonds, large-cap blue chips.
- Block II (medium): growth equities, sector ETFs, mid caps.
- Block III (high): crypto assets (BTC, ETH, SOL), emerging-market equities, small caps.

STEP 3: TERMS
- Score >= 750 (Tier 1): Block I 115%, Block II 135%, Block III 160% collateral.
- Score 600-749 (Tier 2): Block I 130%, Block II 155%, Block III 190% collateral.
- Score < 600 (Tier 3): Block I 150%, Block II 175%, Block III 220% collateral.
Liquidation threshold is 115 for Block III, null otherwise.

STEP 4: PRICING
Base commission: 1 month 1.0%, 3 months 2.8%, 6 months 5.2%, 12 months 9.8%.
Multiply by 1.0 for Tier 1, 1.25 for Tier 2, 1.75 for Tier 3.

Return ONLY one raw JSON object, no markdown and no commentary, with exactly this schema:
{{
  "calculated_trust_score": "Number (300-850)",
  "scoring_reasoning": "String (points added and subtracted in step 1)",
  "asset_classification": {{"block": "String", "volatility_description": "String"}},
  "underwriting_decision": {{
    "trust_tier": "String",
    "required_collateral_percentage": "Number",
    "liquidation_threshold_percentage": "Number or null"
  }},
  "pricing_array_percentages": {{
    "1_month": "Number", "3_month": "Number", "6_month": "Number", "12_month": "Number"
  }}
}}"""


def build_user_content(
    profile: ReputationProfile,
    asset: str,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Data half of the request: profile, asset and request timestamp."""
    now = now or datetime.now(timezone.utc)
    return {
        "collateral_asset": asset,
        "reputation_profile": profile.to_dict(),
        "rubric_version": RUBRIC_VERSION,
        "timestamp": now.isoformat(),
    }


def build_request_payload(
    profile: ReputationProfile,
    asset: str,
    settings: Settings,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Chat-completions request body for the scoring engine."""
    return {
        "model": settings.scoring_engine_model,
        "messages": [
            {"role": "system", "content": RUBRIC_INSTRUCTION},
            {"role": "user", "content": json.dumps(build_user_content(profile, asset, now))},
        ],
        "temperature": settings.scoring_engine_temperature,
        "top_p": settings.scoring_engine_top_p,
        "frequency_penalty": 0,
        "presence_penalty": 0,
    }
