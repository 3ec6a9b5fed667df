"""
Pytest tests for the FastAPI endpoints (/health, /reputation, /underwriting).

Uses the api_client fixture: outbound HTTP goes to FakeUpstreams and settings
are overridden, so no env or network is needed.
"""

from __future__ import annotations

import dataclasses
import json

import httpx

VALID_WALLET = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"


def test_health(api_client):
    r = api_client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
    assert r.headers["X-Request-ID"]


def test_reputation_returns_profile(api_client, upstreams):
    r = api_client.post(
        "/reputation",
        json={"developer_id": "octocat", "qa_id": 22656, "wallet_address": VALID_WALLET},
    )
    assert r.status_code == 200
    data = r.json()
    assert set(data) == {"developer_history", "qa_reputation", "onchain_activity", "social_attestation"}
    assert data["developer_history"]["present"] is True
    assert data["qa_reputation"]["fields"]["reputation"] == 1500
    assert data["qa_reputation"]["fields"]["user_id"] == "22656"
    assert data["onchain_activity"]["fields"]["verified"] is True
    assert data["social_attestation"]["linkedin_verified"] is True
    assert upstreams.calls_to("engine") == []


def test_reputation_with_no_identifiers(api_client, upstreams):
    r = api_client.post("/reputation", json={})
    assert r.status_code == 200
    assert all(not r.json()[k]["present"] for k in ("developer_history", "qa_reputation", "onchain_activity"))
    assert upstreams.calls == []


def test_reputation_source_failure_is_not_an_error(api_client, upstreams):
    upstreams.handlers["github"] = lambda r: httpx.Response(500)
    r = api_client.post("/reputation", json={"developer_id": "octocat"})
    assert r.status_code == 200
    assert "HTTP 500" in r.json()["developer_history"]["fetch_error"]


def test_underwriting_success(api_client, upstreams, engine_decision):
    upstreams.engine_content = "Here you go: " + json.dumps(engine_decision(score=705, tier="Tier 2"))
    r = api_client.post(
        "/underwriting",
        json={"developer_id": "octocat", "wallet_address": VALID_WALLET, "collateral_asset": "sol"},
    )
    assert r.status_code == 200
    body = r.json()
    assert set(body) == {"profile", "decision"}
    decision = body["decision"]
    assert decision["score"] == 705
    assert decision["asset"] == "SOL"
    assert decision["tier"] == "tier_2"
    assert decision["block"] == "high"
    assert decision["required_collateral_pct"] == 190.0
    assert decision["liquidation_threshold_pct"] == 115.0
    assert [p["commission_pct"] for p in decision["pricing"]] == [1.25, 3.5, 6.5, 12.25]


def test_underwriting_missing_asset_is_400(api_client, upstreams):
    r = api_client.post("/underwriting", json={"developer_id": "octocat"})
    assert r.status_code == 400
    assert r.json()["error_type"] == "validation_error"
    assert "collateral_asset" in r.json()["detail"]
    assert upstreams.calls == []


def test_underwriting_unknown_asset_is_400(api_client, upstreams):
    r = api_client.post("/underwriting", json={"collateral_asset": "MOONCOIN"})
    assert r.status_code == 400
    assert "MOONCOIN" in r.json()["detail"]
    assert upstreams.calls == []


def test_underwriting_missing_engine_key_is_500(api_client, upstreams, settings):
    from backend_trustlend.api_server.server import app
    from backend_trustlend.api_server.underwriting import get_app_settings

    app.dependency_overrides[get_app_settings] = lambda: dataclasses.replace(settings, scoring_engine_api_key="")
    r = api_client.post("/underwriting", json={"collateral_asset": "SPY"})
    assert r.status_code == 500
    assert r.json()["error_type"] == "configuration_error"
    assert upstreams.calls == []


def test_underwriting_unparsable_reply_is_500(api_client, upstreams):
    upstreams.engine_content = "no decision today"
    r = api_client.post("/underwriting", json={"collateral_asset": "SPY"})
    assert r.status_code == 500
    body = r.json()
    assert body["error_type"] == "upstream_contract_violation"
    assert body["raw_text"] == "no decision today"


def test_underwriting_engine_outage_is_500(api_client, upstreams):
    upstreams.handlers["engine"] = lambda r: httpx.Response(503)
    r = api_client.post("/underwriting", json={"collateral_asset": "SPY"})
    assert r.status_code == 500
    assert r.json()["error_type"] == "upstream_unavailable"


def test_underwriting_overlong_asset_is_400(api_client, upstreams):
    r = api_client.post("/underwriting", json={"collateral_asset": "X" * 40})
    assert r.status_code == 400
    assert r.json()["error_type"] == "validation_error"
    assert upstreams.calls == []


def test_underwriting_numeric_asset_is_400(api_client, upstreams):
    r = api_client.post("/underwriting", json={"collateral_asset": 5})
    assert r.status_code == 400
    assert r.json()["detail"] == "Unrecognized collateral asset: 5"
    assert upstreams.calls == []


def test_underwriting_non_finite_score_is_500_with_raw_text(api_client, upstreams, engine_decision):
    upstreams.engine_content = json.dumps(engine_decision(score=float("nan")))
    r = api_client.post("/underwriting", json={"developer_id": "octocat", "collateral_asset": "SPY"})
    assert r.status_code == 500
    assert r.headers["content-type"].startswith("application/json")
    body = r.json()
    assert body["error_type"] == "upstream_contract_violation"
    assert "calculated_trust_score" in body["detail"]
    assert "NaN" in body["raw_text"]
