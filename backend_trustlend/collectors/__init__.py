"""
Reputation source collectors.

One collector per external source: developer history (GitHub), Q&A reputation
(StackOverflow) and on-chain activity (Solana via Helius). Each returns a
SourceSignal and never raises for source failures.
"""

from backend_trustlend.collectors.github import collect_developer_history
from backend_trustlend.collectors.helius import collect_onchain_activity
from backend_trustlend.collectors.models import (
    SOCIAL_ATTESTATION,
    ReputationProfile,
    ReputationRequest,
    SourceKind,
    SourceSignal,
)
from backend_trustlend.collectors.stackoverflow import collect_qa_reputation

__all__ = [
    "SOCIAL_ATTESTATION",
    "ReputationProfile",
    "ReputationRequest",
    "SourceKind",
    "SourceSignal",
    "collect_developer_history",
    "collect_onchain_activity",
    "collect_qa_reputation",
]
