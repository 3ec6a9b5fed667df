"""
Profile aggregator: fan out to all collectors, join, merge into a ReputationProfile.

All collectors run concurrently and are awaited together; the profile is built
only after every one has settled. A failed or absent source just leaves its
slot empty. The social attestation placeholder is attached unconditionally.
"""

from __future__ import annotations

import asyncio
from datetime import datetime

import httpx

from backend_trustlend.collectors import (
    SOCIAL_ATTESTATION,
    ReputationProfile,
    ReputationRequest,
    SourceKind,
    SourceSignal,
    collect_developer_history,
    collect_onchain_activity,
    collect_qa_reputation,
)
from backend_trustlend.config import Settings
from backend_trustlend.trustlend_logging import get_logger

logger = get_logger(__name__)


def _settled(kind: SourceKind, result: SourceSignal | BaseException) -> SourceSignal:
    """Turn an exception that escaped a collector into an absent signal."""
    if isinstance(result, BaseException):
        if isinstance(result, asyncio.CancelledError):
            raise result
        logger.error("collector_crashed", source=kind.value, error=repr(result))
        return SourceSignal.absent(kind, fetch_error=f"{kind.value} collector error: {result}")
    return result


async def aggregate_profile(
    request: ReputationRequest,
    client: httpx.AsyncClient,
    settings: Settings,
    now: datetime | None = None,
) -> ReputationProfile:
    """Collect all three signals concurrently and merge them into one profile."""
    results = await asyncio.gather(
        collect_developer_history(request.developer_id, client, settings, now=now),
        collect_qa_reputation(request.qa_id, client, settings),
        collect_onchain_activity(request.wallet_address, client, settings),
        return_exceptions=True,
    )
    developer, qa, onchain = (
        _settled(kind, result)
        for kind, result in zip(
            (SourceKind.DEVELOPER_HISTORY, SourceKind.QA_REPUTATION, SourceKind.ONCHAIN_ACTIVITY),
            results,
        )
    )
    profile = ReputationProfile(
        developer_history=developer,
        qa_reputation=qa,
        onchain_activity=onchain,
        social_attestation=SOCIAL_ATTESTATION,
    )
    logger.info(
        "profile_aggregated",
        present_sources=[s.source_kind.value for s in profile.present_signals],
        failed_sources=[s.source_kind.value for s in profile.signals if s.fetch_error],
    )
    return profile
