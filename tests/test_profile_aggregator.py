"""
Pytest tests for profile aggregation: concurrency, partial failure, empty profiles.
"""

from __future__ import annotations

import dataclasses
import time
from unittest.mock import patch

import httpx
import pytest

from backend_trustlend.analytics.profile_aggregator import aggregate_profile
from backend_trustlend.collectors import (
    SOCIAL_ATTESTATION,
    ReputationProfile,
    ReputationRequest,
    SourceKind,
    SourceSignal,
)

VALID_WALLET = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"
FULL_REQUEST = ReputationRequest(developer_id="octocat", qa_id="22656", wallet_address=VALID_WALLET)


def test_full_profile(upstreams, settings, run_with_client, now):
    profile = run_with_client(lambda c: aggregate_profile(FULL_REQUEST, c, settings, now=now))

    assert [s.present for s in profile.signals] == [True, True, True]
    assert profile.developer_history.fields["account_age_years"] == 3.21
    assert profile.qa_reputation.fields["reputation"] == 1500
    assert profile.onchain_activity.fields["verified"] is True
    assert dict(profile.social_attestation) == dict(SOCIAL_ATTESTATION)
    assert profile.is_empty is False


def test_empty_request_gives_valid_empty_profile(upstreams, settings, run_with_client):
    profile = run_with_client(lambda c: aggregate_profile(ReputationRequest(), c, settings))

    assert profile.is_empty is True
    assert all(not s.present and s.fetch_error is None for s in profile.signals)
    assert profile.social_attestation["linkedin_verified"] is True
    assert upstreams.calls == []

    data = profile.to_dict()
    assert set(data) == {"developer_history", "qa_reputation", "onchain_activity", "social_attestation"}
    assert data["developer_history"]["present"] is False


def test_one_failing_source_keeps_the_others(upstreams, settings, run_with_client, now):
    upstreams.handlers["stackexchange"] = lambda r: httpx.Response(500)
    profile = run_with_client(lambda c: aggregate_profile(FULL_REQUEST, c, settings, now=now))

    assert profile.qa_reputation.present is False
    assert "HTTP 500" in profile.qa_reputation.fetch_error
    assert profile.developer_history.present is True
    assert profile.onchain_activity.present is True


def test_slow_source_times_out_without_blocking_siblings(upstreams, settings, run_with_client, now):
    settings = dataclasses.replace(settings, collector_timeout_sec=0.2)
    upstreams.delays["github"] = 5.0

    t0 = time.perf_counter()
    profile = run_with_client(lambda c: aggregate_profile(FULL_REQUEST, c, settings, now=now))
    elapsed = time.perf_counter() - t0

    assert elapsed < 2.0
    assert profile.developer_history.present is False
    assert "timed out" in profile.developer_history.fetch_error
    assert profile.qa_reputation.present is True
    assert profile.onchain_activity.present is True


def test_collectors_run_concurrently(upstreams, settings, run_with_client, now):
    """Three sources each taking 0.3s finish in well under 0.9s."""
    for service in ("github", "stackexchange", "rpc"):
        upstreams.delays[service] = 0.3

    t0 = time.perf_counter()
    profile = run_with_client(lambda c: aggregate_profile(FULL_REQUEST, c, settings, now=now))
    elapsed = time.perf_counter() - t0

    assert len(profile.present_signals) == 3
    assert elapsed < 0.8


def test_unexpected_collector_crash_is_isolated(upstreams, settings, run_with_client, now):
    async def _crash(*args, **kwargs):
        raise RuntimeError("bug in collector")

    with patch("backend_trustlend.analytics.profile_aggregator.collect_qa_reputation", _crash):
        profile = run_with_client(lambda c: aggregate_profile(FULL_REQUEST, c, settings, now=now))

    assert profile.qa_reputation.present is False
    assert "bug in collector" in profile.qa_reputation.fetch_error
    assert profile.developer_history.present is True


def test_request_from_values_cleans_identifiers():
    request = ReputationRequest.from_values(" octocat ", 22656, "   ")
    assert request == ReputationRequest(developer_id="octocat", qa_id="22656", wallet_address=None)


def test_signals_are_immutable(upstreams, settings, run_with_client, now):
    profile = run_with_client(lambda c: aggregate_profile(FULL_REQUEST, c, settings, now=now))
    with pytest.raises(TypeError):
        profile.developer_history.fields["followers"] = 0
    with pytest.raises(dataclasses.FrozenInstanceError):
        profile.developer_history.present = False


def test_profile_defaults_to_declared_attestation():
    profile = ReputationProfile(
        developer_history=SourceSignal.absent(SourceKind.DEVELOPER_HISTORY),
        qa_reputation=SourceSignal.absent(SourceKind.QA_REPUTATION),
        onchain_activity=SourceSignal.absent(SourceKind.ONCHAIN_ACTIVITY),
    )
    assert profile.social_attestation is SOCIAL_ATTESTATION
    assert profile.to_dict()["social_attestation"]["connections"] == "500+"
    assert profile.is_empty is True
