"""
Underwriting rubric: the deterministic half of every decision.

Maps a trust score and a collateral asset to loan terms. Score bounds,
asset → volatility block table, tier thresholds, collateral percentages,
liquidation threshold and tenor pricing are fixed constants here and are the
source of truth for published terms, whatever the scoring engine reports.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from backend_trustlend.core.exceptions import InputValidationError

RUBRIC_VERSION = "trustlend-rubric-v1"

SCORE_MIN = 300
SCORE_MAX = 850
BASE_SCORE = 500

LIQUIDATION_PENALTY = 200
WALLET_AGE_VOLUME_BONUS_CAP = 100
VERIFIED_SOCIAL_BONUS = 100
DEVELOPER_PROOF_BONUS = 100
EMPTY_PROFILE_PENALTY = 100

# No present signal means no evidence for any bonus: base minus the empty-profile penalty.
EMPTY_PROFILE_SCORE_CEILING = BASE_SCORE - EMPTY_PROFILE_PENALTY

TIER_1_MIN_SCORE = 750
TIER_2_MIN_SCORE = 600

HIGH_VOLATILITY_LIQUIDATION_PCT = 115.0

TENOR_MONTHS = (1, 3, 6, 12)
BASE_COMMISSION_PCT = {1: 1.0, 3: 2.8, 6: 5.2, 12: 9.8}
PRICE_DECIMALS = 4


class VolatilityBlock(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def label(self) -> str:
        return {"low": "Block I", "medium": "Block II", "high": "Block III"}[self.value]

    @property
    def description(self) -> str:
        return BLOCK_DESCRIPTIONS[self]


class TrustTier(str, Enum):
    TIER_1 = "tier_1"
    TIER_2 = "tier_2"
    TIER_3 = "tier_3"

    @property
    def number(self) -> int:
        return int(self.value[-1])


BLOCK_DESCRIPTIONS = {
    VolatilityBlock.LOW: "Low volatility: global index ETFs, sovereign AAA bonds, large-cap blue chips",
    VolatilityBlock.MEDIUM: "Medium volatility: growth equities, sector ETFs, mid caps",
    VolatilityBlock.HIGH: "High volatility: crypto assets, emerging-market equities, small caps",
}

ASSET_BLOCKS: dict[str, VolatilityBlock] = {
    # Broad index funds, high-grade bonds, blue chips
    **dict.fromkeys(
        ("SPY", "VOO", "IVV", "VTI", "VT", "ACWI", "URTH", "AGG", "BND", "TLT", "IEF",
         "SHY", "GOVT", "AAPL", "MSFT", "JNJ", "KO", "PG", "JPM", "BRK.B", "V"),
        VolatilityBlock.LOW,
    ),
    # Growth equities, sector funds, mid caps
    **dict.fromkeys(
        ("QQQ", "XLK", "XLF", "XLE", "XLV", "XLI", "SMH", "ARKK", "MDY", "IJH", "VO",
         "NVDA", "TSLA", "AMD", "SHOP", "NFLX", "CRM"),
        VolatilityBlock.MEDIUM,
    ),
    # Crypto majors, emerging-market equities, small caps
    **dict.fromkeys(
        ("BTC", "ETH", "SOL", "JUP", "BONK", "EEM", "VWO", "IEMG", "IWM", "VB", "IJR"),
        VolatilityBlock.HIGH,
    ),
}

COLLATERAL_PCT: dict[TrustTier, dict[VolatilityBlock, float]] = {
    TrustTier.TIER_1: {VolatilityBlock.LOW: 115.0, VolatilityBlock.MEDIUM: 135.0, VolatilityBlock.HIGH: 160.0},
    TrustTier.TIER_2: {VolatilityBlock.LOW: 130.0, VolatilityBlock.MEDIUM: 155.0, VolatilityBlock.HIGH: 190.0},
    TrustTier.TIER_3: {VolatilityBlock.LOW: 150.0, VolatilityBlock.MEDIUM: 175.0, VolatilityBlock.HIGH: 220.0},
}

TIER_PRICE_MULTIPLIER = {
    TrustTier.TIER_1: 1.0,
    TrustTier.TIER_2: 1.25,
    TrustTier.TIER_3: 1.75,
}


@dataclass(frozen=True)
class TenorPrice:
    months: int
    commission_pct: float

    def to_dict(self) -> dict[str, float | int]:
        return {"tenor_months": self.months, "commission_pct": self.commission_pct}


def normalize_asset(asset: str | None) -> str:
    """Upper-case, stripped asset identifier; empty input is a validation error."""
    normalized = (asset or "").strip().upper()
    if not normalized:
        raise InputValidationError("collateral_asset is required")
    return normalized


def classify_asset(asset: str | None) -> VolatilityBlock:
    """Resolve an asset identifier to its volatility block. Unknown identifiers are rejected."""
    normalized = normalize_asset(asset)
    block = ASSET_BLOCKS.get(normalized)
    if block is None:
        raise InputValidationError(f"Unrecognized collateral asset: {normalized}")
    return block


def clamp_score(score: int | float) -> int:
    """Round and clamp a raw score into [SCORE_MIN, SCORE_MAX]."""
    return max(SCORE_MIN, min(SCORE_MAX, int(round(score))))


def tier_for_score(score: int) -> TrustTier:
    if score >= TIER_1_MIN_SCORE:
        return TrustTier.TIER_1
    if score >= TIER_2_MIN_SCORE:
        return TrustTier.TIER_2
    return TrustTier.TIER_3


def required_collateral_pct(tier: TrustTier, block: VolatilityBlock) -> float:
    return COLLATERAL_PCT[tier][block]


def liquidation_threshold_pct(block: VolatilityBlock) -> float | None:
    """Fixed policy: 115% for high-volatility collateral, none otherwise."""
    if block is VolatilityBlock.HIGH:
        return HIGH_VOLATILITY_LIQUIDATION_PCT
    return None


def pricing_schedule(tier: TrustTier) -> tuple[TenorPrice, ...]:
    """Commission per tenor: base rate times the tier multiplier, in tenor order."""
    multiplier = TIER_PRICE_MULTIPLIER[tier]
    return tuple(
        TenorPrice(months=m, commission_pct=round(BASE_COMMISSION_PCT[m] * multiplier, PRICE_DECIMALS))
        for m in TENOR_MONTHS
    )
