"""
Q&A-reputation collector (StackOverflow via the StackExchange API).

Passes reputation and badge counts through verbatim.
"""

from __future__ import annotations

from urllib.parse import quote

import httpx

from backend_trustlend.collectors.base import raise_for_source_status, run_isolated, unexpected_payload
from backend_trustlend.collectors.models import SourceKind, SourceSignal
from backend_trustlend.config import Settings
from backend_trustlend.trustlend_logging import get_logger

logger = get_logger(__name__)

SOURCE = SourceKind.QA_REPUTATION
SITE = "stackoverflow"
BADGE_KINDS = ("gold", "silver", "bronze")


async def _fetch_qa_reputation(
    user_id: str,
    client: httpx.AsyncClient,
    settings: Settings,
) -> SourceSignal:
    params = {"site": SITE}
    if settings.stackexchange_key:
        params["key"] = settings.stackexchange_key
    url = f"{settings.stackexchange_api_url}/users/{quote(user_id, safe='')}"
    response = await client.get(url, params=params, timeout=settings.collector_timeout_sec)
    raise_for_source_status(SOURCE, response)
    try:
        items = response.json().get("items") or []
        if not items:
            logger.info("qa_reputation_user_not_found", user_id=user_id)
            return SourceSignal.absent(SOURCE)

        user = items[0]
        fields: dict[str, int | str] = {"user_id": user_id}
        if user.get("reputation") is not None:
            fields["reputation"] = user["reputation"]
        badges = user.get("badge_counts") or {}
        for kind in BADGE_KINDS:
            if badges.get(kind) is not None:
                fields[f"badge_{kind}"] = badges[kind]
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        raise unexpected_payload(SOURCE, e) from e
    return SourceSignal(source_kind=SOURCE, present=True, fields=fields)


async def collect_qa_reputation(
    user_id: str | None,
    client: httpx.AsyncClient,
    settings: Settings,
) -> SourceSignal:
    """Return the Q&A-reputation signal; absent without a network call when user_id is empty."""
    user_id = (user_id or "").strip()
    if not user_id:
        return SourceSignal.absent(SOURCE)
    return await run_isolated(
        SOURCE,
        _fetch_qa_reputation(user_id, client, settings),
        settings.collector_timeout_sec,
    )
