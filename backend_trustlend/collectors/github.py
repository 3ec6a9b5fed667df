"""
Developer-history collector (GitHub user profile).

Normalizes account age in fractional years (2 decimals), public repo count and
follower count for one username.
"""

from __future__ import annotations

from datetime import datetime, timezone
from urllib.parse import quote

import httpx

from backend_trustlend.collectors.base import (
    raise_for_source_status,
    run_isolated,
    unexpected_payload,
)
from backend_trustlend.collectors.models import SourceKind, SourceSignal
from backend_trustlend.config import Settings
from backend_trustlend.trustlend_logging import get_logger

logger = get_logger(__name__)

SOURCE = SourceKind.DEVELOPER_HISTORY
USER_AGENT = "TrustLend-Underwriting"
SECONDS_PER_YEAR = 365.25 * 24 * 3600


def account_age_years(created_at: str, now: datetime | None = None) -> float:
    """Years between an ISO 8601 creation timestamp and now, rounded to 2 decimals."""
    created = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return round((now - created).total_seconds() / SECONDS_PER_YEAR, 2)


async def _fetch_developer_history(
    username: str,
    client: httpx.AsyncClient,
    settings: Settings,
    now: datetime | None,
) -> SourceSignal:
    headers = {"User-Agent": USER_AGENT, "Accept": "application/vnd.github+json"}
    if settings.github_token:
        headers["Authorization"] = f"Bearer {settings.github_token}"
    url = f"{settings.github_api_url}/users/{quote(username, safe='')}"
    response = await client.get(url, headers=headers, timeout=settings.collector_timeout_sec)
    raise_for_source_status(SOURCE, response)
    try:
        data = response.json()
        fields = {
            "username": username,
            "account_age_years": account_age_years(data["created_at"], now),
            "public_repos": int(data.get("public_repos") or 0),
            "followers": int(data.get("followers") or 0),
        }
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        raise unexpected_payload(SOURCE, e) from e
    logger.debug("developer_history_fetched", **fields)
    return SourceSignal(source_kind=SOURCE, present=True, fields=fields)


async def collect_developer_history(
    username: str | None,
    client: httpx.AsyncClient,
    settings: Settings,
    now: datetime | None = None,
) -> SourceSignal:
    """Return the developer-history signal; absent without a network call when username is empty."""
    username = (username or "").strip()
    if not username:
        return SourceSignal.absent(SOURCE)
    return await run_isolated(
        SOURCE,
        _fetch_developer_history(username, client, settings, now),
        settings.collector_timeout_sec,
    )
