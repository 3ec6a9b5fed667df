"""
Underwriting pipeline: validate -> aggregate -> prompt -> engine -> validate -> assemble.

Single entrypoint for the API server and the CLI. Inputs are validated and the
engine credential checked before any external call. One httpx.AsyncClient per
run unless the caller injects one.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, AsyncIterator

import httpx

from backend_trustlend.ai_engine.inference_client import request_decision
from backend_trustlend.ai_engine.prompt_builder import build_request_payload
from backend_trustlend.ai_engine.response_parser import parse_engine_decision
from backend_trustlend.analytics.decision_assembler import TrustDecision, assemble_decision
from backend_trustlend.analytics.profile_aggregator import aggregate_profile
from backend_trustlend.analytics.rubric import classify_asset, normalize_asset
from backend_trustlend.collectors import ReputationProfile, ReputationRequest
from backend_trustlend.config import Settings, get_settings
from backend_trustlend.core.exceptions import ConfigurationError
from backend_trustlend.trustlend_logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class UnderwritingResult:
    profile: ReputationProfile
    decision: TrustDecision

    def to_dict(self) -> dict[str, Any]:
        return {"profile": self.profile.to_dict(), "decision": self.decision.to_dict()}


@asynccontextmanager
async def _client_scope(client: httpx.AsyncClient | None) -> AsyncIterator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient() as owned:
        yield owned


async def build_reputation_profile(
    request: ReputationRequest,
    client: httpx.AsyncClient | None = None,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> ReputationProfile:
    """Aggregate the reputation profile only (no scoring)."""
    settings = settings or get_settings()
    async with _client_scope(client) as http:
        return await aggregate_profile(request, http, settings, now=now)


async def run_underwriting(
    request: ReputationRequest,
    collateral_asset: str | None,
    client: httpx.AsyncClient | None = None,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> UnderwritingResult:
    """
    Full underwriting run for one borrower and one collateral asset.

    Raises InputValidationError (missing / unknown asset), ConfigurationError
    (no engine credential), UpstreamUnavailableError or UpstreamContractViolation.
    Collector failures never raise; they only thin out the profile.
    """
    settings = settings or get_settings()
    asset = normalize_asset(collateral_asset)
    block = classify_asset(asset)
    if not settings.scoring_engine_api_key:
        raise ConfigurationError("SCORING_ENGINE_API_KEY is not configured")

    logger.info("underwriting_start", asset=asset, block=block.value)
    async with _client_scope(client) as http:
        profile = await aggregate_profile(request, http, settings, now=now)
        payload = build_request_payload(profile, asset, settings, now=now)
        obj, raw_text = await request_decision(payload, http, settings)

    engine = parse_engine_decision(obj, raw_text)
    decision = assemble_decision(engine, asset, profile)
    logger.info(
        "underwriting_done",
        asset=asset,
        score=decision.score,
        tier=decision.tier.value,
        required_collateral_pct=decision.required_collateral_pct,
    )
    return UnderwritingResult(profile=profile, decision=decision)
