"""
Test that trustlend_logging can be imported without circular import and logger works.
"""

from __future__ import annotations


def test_logging_import():
    """Import get_logger from trustlend_logging and use the logger."""
    from backend_trustlend.trustlend_logging import bind_request, get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    # Smoke test: call info (should not raise)
    bind_request("req-1")
    logger.info("test_message", key="value")


def test_stamp_event_renames_event_and_adds_timestamp():
    from backend_trustlend.trustlend_logging.logger import _stamp_event

    out = _stamp_event(None, "info", {"event": "profile_aggregated", "source": "github"})
    assert "event" not in out
    assert out["event_type"] == "profile_aggregated"
    assert out["message"] == "profile_aggregated"
    assert out["timestamp"].endswith("+00:00")
    assert out["source"] == "github"
