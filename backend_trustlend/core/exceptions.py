"""
Application-level exceptions.

Every domain error derives from TrustLendError and carries an error_type and
the HTTP status the API layer answers with. SourceUnavailableError never leaves
a collector; the others are fatal for the request that raised them.
"""

from __future__ import annotations

from typing import Any


class TrustLendError(Exception):
    """Base class for all TrustLend domain errors."""

    error_type = "trustlend_error"
    http_status = 500

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Error body for API responses and logs."""
        return {"detail": self.message, "error_type": self.error_type}


class SourceUnavailableError(TrustLendError):
    """One reputation source failed or timed out. Recovered inside the collector."""

    error_type = "source_unavailable"
    http_status = 502

    def __init__(self, source: str, message: str) -> None:
        super().__init__(message, {"source": source})
        self.source = source


class ConfigurationError(TrustLendError):
    """A required setting (e.g. the scoring engine credential) is missing."""

    error_type = "configuration_error"
    http_status = 500


class InputValidationError(TrustLendError):
    """Caller omitted a required input or supplied an unrecognized value."""

    error_type = "validation_error"
    http_status = 400


class UpstreamContractViolation(TrustLendError):
    """Scoring engine reply has no parsable JSON object or misses required fields."""

    error_type = "upstream_contract_violation"
    http_status = 500

    def __init__(self, message: str, raw_text: str | None = None) -> None:
        super().__init__(message)
        self.raw_text = raw_text

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.raw_text is not None:
            data["raw_text"] = self.raw_text[:2000]
        return data


class UpstreamUnavailableError(TrustLendError):
    """Scoring engine call failed at the transport level, timed out or returned non-2xx."""

    error_type = "upstream_unavailable"
    http_status = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message, {"status_code": status_code} if status_code else None)
        self.status_code = status_code
