"""
Pytest fixtures for TrustLend tests.

All outbound HTTP goes through httpx.MockTransport backed by FakeUpstreams, so
tests run without GitHub, StackExchange, Solana RPC or the scoring engine.
"""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from typing import Any, Callable

import httpx
import pytest

from backend_trustlend.config import Settings

# 2023-08-01 -> 2026-10-17 is 1173 days, i.e. 3.21 years
NOW = datetime(2026, 10, 17, tzinfo=timezone.utc)

GITHUB_HOST = "github.test"
STACKEXCHANGE_HOST = "stackexchange.test"
RPC_HOST = "rpc.test"
ENGINE_HOST = "engine.test"


def make_engine_decision(
    score: Any = 780,
    reasoning: str = "Base 500, +100 developer proof, +100 verified identity, +80 wallet age.",
    block: str = "Block I",
    tier: Any = "Tier 1",
    collateral: float = 115,
    liquidation: float | None = None,
    prices: tuple[float, float, float, float] = (1.0, 2.8, 5.2, 9.8),
) -> dict[str, Any]:
    return {
        "calculated_trust_score": score,
        "scoring_reasoning": reasoning,
        "asset_classification": {"block": block, "volatility_description": "low volatility"},
        "underwriting_decision": {
            "trust_tier": tier,
            "required_collateral_percentage": collateral,
            "liquidation_threshold_percentage": liquidation,
        },
        "pricing_array_percentages": {
            "1_month": prices[0],
            "3_month": prices[1],
            "6_month": prices[2],
            "12_month": prices[3],
        },
    }


def chat_completion(content: str) -> dict[str, Any]:
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


class FakeUpstreams:
    """
    Routes mocked requests by host. Each service has a handler that can be
    replaced per test; delays (seconds) simulate slow sources. calls records
    (service, request) for every request that reached the transport.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, httpx.Request]] = []
        self.delays: dict[str, float] = {}
        self.github_user: dict[str, Any] = {
            "login": "octocat",
            "created_at": "2023-08-01T00:00:00Z",
            "public_repos": 12,
            "followers": 40,
        }
        self.se_items: list[dict[str, Any]] = [
            {"user_id": 22656, "reputation": 1500, "badge_counts": {"gold": 2, "silver": 10, "bronze": 30}}
        ]
        self.lamports = 2_500_000_000
        self.asset_total = 3
        self.engine_content = json.dumps(make_engine_decision())
        self.handlers: dict[str, Callable[[httpx.Request], httpx.Response]] = {
            "github": self._github,
            "stackexchange": self._stackexchange,
            "rpc": self._rpc,
            "engine": self._engine,
        }

    def calls_to(self, service: str) -> list[httpx.Request]:
        return [r for s, r in self.calls if s == service]

    def _github(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=self.github_user)

    def _stackexchange(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"items": self.se_items})

    def _rpc(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if body["method"] == "getBalance":
            result: dict[str, Any] = {"context": {"slot": 1}, "value": self.lamports}
        else:
            result = {"total": self.asset_total, "limit": 10, "page": 1, "items": []}
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    def _engine(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=chat_completion(self.engine_content))

    async def handle(self, request: httpx.Request) -> httpx.Response:
        service = {
            GITHUB_HOST: "github",
            STACKEXCHANGE_HOST: "stackexchange",
            RPC_HOST: "rpc",
            ENGINE_HOST: "engine",
        }[request.url.host]
        self.calls.append((service, request))
        delay = self.delays.get(service)
        if delay:
            await asyncio.sleep(delay)
        return self.handlers[service](request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handle))


@pytest.fixture
def upstreams() -> FakeUpstreams:
    return FakeUpstreams()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        github_api_url=f"https://{GITHUB_HOST}",
        stackexchange_api_url=f"https://{STACKEXCHANGE_HOST}/2.3",
        ledger_rpc_url=f"https://{RPC_HOST}/?api-key=test",
        scoring_engine_api_url=f"https://{ENGINE_HOST}/v1/chat/completions",
        scoring_engine_api_key="test-key",
        scoring_engine_model="test-model",
        collector_timeout_sec=0.5,
        inference_timeout_sec=0.5,
    )


@pytest.fixture
def run_with_client(upstreams):
    """Run an async callable that takes the mocked client: run_with_client(lambda c: coro(c))."""

    def _run(fn):
        async def _main():
            async with upstreams.client() as client:
                return await fn(client)

        return asyncio.run(_main())

    return _run


@pytest.fixture
def api_client(upstreams, settings):
    """FastAPI TestClient with outbound HTTP and settings overridden."""
    from fastapi.testclient import TestClient

    from backend_trustlend.api_server.server import app
    from backend_trustlend.api_server.underwriting import get_app_settings, get_http_client

    async def _client():
        async with upstreams.client() as client:
            yield client

    app.dependency_overrides[get_http_client] = _client
    app.dependency_overrides[get_app_settings] = lambda: settings
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def engine_decision():
    """Factory for scoring engine reply objects (see make_engine_decision)."""
    return make_engine_decision


@pytest.fixture
def engine_reply():
    """Factory wrapping reply text in a chat-completions body."""
    return chat_completion


@pytest.fixture
def now() -> datetime:
    return NOW
