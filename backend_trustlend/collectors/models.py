"""
Data models for reputation collectors and the merged profile.

Responsibilities:
- SourceSignal: one normalized piece of evidence from one external source.
- ReputationProfile: the merged signals for one request plus the declared
  social attestation placeholder.
- ReputationRequest: the caller-supplied identifiers (each optional).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Union

FieldValue = Union[int, float, str, bool]

# Declared claim used while no social-graph source is wired in. Not evidence.
SOCIAL_ATTESTATION: Mapping[str, Any] = MappingProxyType({
    "linkedin_verified": True,
    "connections": "500+",
    "declared": True,
})


class SourceKind(str, Enum):
    """The three reputation sources, keyed by their profile slot name."""

    DEVELOPER_HISTORY = "developer_history"
    QA_REPUTATION = "qa_reputation"
    ONCHAIN_ACTIVITY = "onchain_activity"


@dataclass(frozen=True)
class SourceSignal:
    """
    Normalized result of one collector call.

    present is False when the identifier was missing, the subject was not
    found, or the fetch failed (fetch_error then says why).

    fields values are numbers or strings, plus booleans for derived flags such
    as the on-chain verified marker.
    """

    source_kind: SourceKind
    present: bool
    fields: Mapping[str, FieldValue] = field(default_factory=dict)
    fetch_error: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @classmethod
    def absent(cls, source_kind: SourceKind, fetch_error: str | None = None) -> "SourceSignal":
        """Signal with no data; fetch_error set when a fetch was attempted and failed."""
        return cls(source_kind=source_kind, present=False, fields={}, fetch_error=fetch_error)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source_kind.value,
            "present": self.present,
            "fields": dict(self.fields),
            "fetch_error": self.fetch_error,
        }


@dataclass(frozen=True)
class ReputationRequest:
    """Identifiers for one aggregation request. Any of them may be absent."""

    developer_id: str | None = None
    qa_id: str | None = None
    wallet_address: str | None = None

    @classmethod
    def from_values(
        cls,
        developer_id: Any = None,
        qa_id: Any = None,
        wallet_address: Any = None,
    ) -> "ReputationRequest":
        """Strip values and turn blanks into None; numeric Q&A ids become strings."""

        def _clean(value: Any) -> str | None:
            if value is None:
                return None
            text = str(value).strip()
            return text or None

        return cls(
            developer_id=_clean(developer_id),
            qa_id=_clean(qa_id),
            wallet_address=_clean(wallet_address),
        )


@dataclass(frozen=True)
class ReputationProfile:
    """Merged signals for one request. Valid even when no signal is present."""

    developer_history: SourceSignal
    qa_reputation: SourceSignal
    onchain_activity: SourceSignal
    social_attestation: Mapping[str, Any] = field(default_factory=lambda: SOCIAL_ATTESTATION)

    @property
    def signals(self) -> tuple[SourceSignal, SourceSignal, SourceSignal]:
        return (self.developer_history, self.qa_reputation, self.onchain_activity)

    @property
    def present_signals(self) -> list[SourceSignal]:
        return [s for s in self.signals if s.present]

    @property
    def is_empty(self) -> bool:
        """True when no collector produced data (the attestation does not count)."""
        return not self.present_signals

    def to_dict(self) -> dict[str, Any]:
        return {
            SourceKind.DEVELOPER_HISTORY.value: self.developer_history.to_dict(),
            SourceKind.QA_REPUTATION.value: self.qa_reputation.to_dict(),
            SourceKind.ONCHAIN_ACTIVITY.value: self.onchain_activity.to_dict(),
            "social_attestation": dict(self.social_attestation),
        }
