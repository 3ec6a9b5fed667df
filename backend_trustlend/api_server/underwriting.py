"""
FastAPI router: POST /reputation, POST /underwriting.

Each request gets its own httpx.AsyncClient (get_http_client dependency) and
runs the pipeline end to end; nothing is cached between requests.
"""

from __future__ import annotations

from typing import Any, AsyncIterator

import httpx
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from backend_trustlend.analytics.underwriting_pipeline import build_reputation_profile, run_underwriting
from backend_trustlend.collectors import ReputationRequest
from backend_trustlend.config import Settings, get_settings
from backend_trustlend.core.exceptions import InputValidationError
from backend_trustlend.trustlend_logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["underwriting"])


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """Dependency: one outbound HTTP client per request."""
    async with httpx.AsyncClient() as client:
        yield client


def get_app_settings() -> Settings:
    """Dependency: settings read from env (overridable in tests)."""
    return get_settings()


class ReputationBody(BaseModel):
    """POST /reputation body: any subset of the three identifiers."""

    developer_id: str | None = Field(None, max_length=128, description="GitHub username")
    qa_id: str | int | None = Field(None, description="StackOverflow user id")
    wallet_address: str | None = Field(None, max_length=64, description="Solana wallet (base58)")

    def to_request(self) -> ReputationRequest:
        return ReputationRequest.from_values(self.developer_id, self.qa_id, self.wallet_address)


class UnderwritingBody(ReputationBody):
    """
    POST /underwriting body.

    collateral_asset is left untyped; the handler and the rubric reject missing or
    unrecognized values with 400, not 422.
    """

    collateral_asset: Any = Field(None, description="Collateral identifier, e.g. SOL, SPY")

    def asset_text(self) -> str:
        return "" if self.collateral_asset is None else str(self.collateral_asset).strip()


@router.post("/reputation")
async def post_reputation(
    body: ReputationBody,
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """Return the aggregated reputation profile. Source failures only leave slots empty."""
    profile = await build_reputation_profile(body.to_request(), client, settings)
    return profile.to_dict()


@router.post("/underwriting")
async def post_underwriting(
    body: UnderwritingBody,
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """
    Return {profile, decision} for one borrower and collateral asset.

    400 when collateral_asset is missing or unrecognized; 500 on configuration
    errors, unparsable engine replies or engine outages.
    """
    asset = body.asset_text()
    if not asset:
        raise InputValidationError("collateral_asset is required")
    result = await run_underwriting(body.to_request(), asset, client, settings)
    return result.to_dict()
