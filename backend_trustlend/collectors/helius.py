"""
On-chain activity collector (Solana ledger via Helius JSON-RPC).

Issues getBalance and getAssetsByOwner concurrently for one wallet and combines
them into sol_balance (SOL, 4 decimals), asset_count (non-fungible assets) and
a binary verified flag: funded AND owns at least one asset. Magnitude is ignored.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
from solders.pubkey import Pubkey

from backend_trustlend.collectors.base import (
    raise_for_source_status,
    run_isolated,
    short_id,
    unexpected_payload,
)
from backend_trustlend.collectors.models import SourceKind, SourceSignal
from backend_trustlend.config import Settings
from backend_trustlend.core.exceptions import SourceUnavailableError
from backend_trustlend.trustlend_logging import get_logger

logger = get_logger(__name__)

SOURCE = SourceKind.ONCHAIN_ACTIVITY
LAMPORTS_PER_SOL = 1_000_000_000
ASSETS_PAGE_LIMIT = 10
TRUST_SIGNAL_VERIFIED = "Verified Web3 Human"
TRUST_SIGNAL_LOW_ACTIVITY = "Low Web3 Activity"


def is_valid_wallet_address(address: str) -> bool:
    """True when address parses as a base58 Solana public key."""
    try:
        Pubkey.from_string(address)
    except Exception:
        return False
    return True


def summarize_wallet(lamports: int, asset_count: int) -> dict[str, Any]:
    """Combine the two ledger reads into the on-chain signal fields."""
    sol_balance = lamports / LAMPORTS_PER_SOL
    verified = sol_balance > 0 and asset_count > 0
    return {
        "sol_balance": round(sol_balance, 4),
        "asset_count": asset_count,
        "verified": verified,
        "trust_signal": TRUST_SIGNAL_VERIFIED if verified else TRUST_SIGNAL_LOW_ACTIVITY,
    }


async def _rpc(
    client: httpx.AsyncClient,
    settings: Settings,
    request_id: str,
    method: str,
    params: Any,
) -> Any:
    body = {"jsonrpc": "2.0", "id": request_id, "method": method, "params": params}
    response = await client.post(settings.ledger_rpc_url, json=body, timeout=settings.collector_timeout_sec)
    raise_for_source_status(SOURCE, response)
    try:
        data = response.json()
        error = data.get("error")
    except (ValueError, AttributeError) as e:
        raise unexpected_payload(SOURCE, e) from e
    if error:
        raise SourceUnavailableError(SOURCE.value, f"{method} failed: {error}")
    return data.get("result") or {}


async def _get_balance_lamports(address: str, client: httpx.AsyncClient, settings: Settings) -> int:
    result = await _rpc(client, settings, "balance", "getBalance", [address])
    try:
        return int(result.get("value") or 0)
    except (ValueError, TypeError, AttributeError) as e:
        raise unexpected_payload(SOURCE, e) from e


async def _get_asset_count(address: str, client: httpx.AsyncClient, settings: Settings) -> int:
    params = {
        "ownerAddress": address,
        "page": 1,
        "limit": ASSETS_PAGE_LIMIT,
        "displayOptions": {"showFungible": False},
    }
    result = await _rpc(client, settings, "assets", "getAssetsByOwner", params)
    try:
        return int(result.get("total") or 0)
    except (ValueError, TypeError, AttributeError) as e:
        raise unexpected_payload(SOURCE, e) from e


async def _fetch_onchain_activity(
    address: str,
    client: httpx.AsyncClient,
    settings: Settings,
) -> SourceSignal:
    reads = [
        asyncio.ensure_future(_get_balance_lamports(address, client, settings)),
        asyncio.ensure_future(_get_asset_count(address, client, settings)),
    ]
    try:
        lamports, asset_count = await asyncio.gather(*reads)
    except BaseException:
        # A failed or cancelled read must not leave its sibling running.
        for read in reads:
            read.cancel()
        await asyncio.gather(*reads, return_exceptions=True)
        raise
    fields = summarize_wallet(lamports, asset_count)
    logger.debug("onchain_activity_fetched", wallet=short_id(address), **fields)
    return SourceSignal(source_kind=SOURCE, present=True, fields=fields)


async def collect_onchain_activity(
    wallet_address: str | None,
    client: httpx.AsyncClient,
    settings: Settings,
) -> SourceSignal:
    """Return the on-chain signal; absent without a network call for empty or malformed addresses."""
    address = (wallet_address or "").strip()
    if not address:
        return SourceSignal.absent(SOURCE)
    if not is_valid_wallet_address(address):
        logger.warning("onchain_invalid_wallet", wallet=short_id(address))
        return SourceSignal.absent(SOURCE, fetch_error="invalid Solana wallet address")
    return await run_isolated(
        SOURCE,
        _fetch_onchain_activity(address, client, settings),
        settings.collector_timeout_sec,
    )
