"""
Scoring-engine client.

One request/response call per underwriting request: no retry. A missing
credential fails before any network traffic. The reply text is free-form and
must contain a JSON object; extract_json_object() finds the first one.
"""

from __future__ import annotations

import asyncio
import json
import time
from typing import Any

import httpx

from backend_trustlend.config import Settings
from backend_trustlend.core.exceptions import (
    ConfigurationError,
    UpstreamContractViolation,
    UpstreamUnavailableError,
)
from backend_trustlend.trustlend_logging import get_logger

logger = get_logger(__name__)

_DECODER = json.JSONDecoder()


def extract_json_object(text: str) -> dict[str, Any]:
    """
    Return the first JSON object embedded in text.

    Tries every '{' in order and decodes the balanced span starting there, so
    prose or markdown fences around the object are ignored.
    """
    if text:
        start = text.find("{")
        while start != -1:
            try:
                obj, _ = _DECODER.raw_decode(text, start)
            except json.JSONDecodeError:
                obj = None
            if isinstance(obj, dict):
                return obj
            start = text.find("{", start + 1)
    raise UpstreamContractViolation(
        "Scoring engine reply contains no parsable JSON object",
        raw_text=text,
    )


def reply_content(body: Any) -> str:
    """Pull choices[0].message.content out of a chat-completions response body."""
    try:
        content = body["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise UpstreamContractViolation(
            f"Unexpected scoring engine response format: {e!r}",
            raw_text=json.dumps(body)[:2000] if body is not None else None,
        ) from e
    if not isinstance(content, str):
        raise UpstreamContractViolation(
            "Scoring engine message content is not text",
            raw_text=str(content),
        )
    return content


async def _post(payload: dict[str, Any], client: httpx.AsyncClient, settings: Settings) -> httpx.Response:
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {settings.scoring_engine_api_key}",
    }
    return await client.post(
        settings.scoring_engine_api_url,
        json=payload,
        headers=headers,
        timeout=settings.inference_timeout_sec,
    )


async def request_decision(
    payload: dict[str, Any],
    client: httpx.AsyncClient,
    settings: Settings,
) -> tuple[dict[str, Any], str]:
    """
    Send the payload to the scoring engine and return (decision_object, raw_text).

    Raises ConfigurationError (no credential), UpstreamUnavailableError (transport,
    timeout, non-2xx) or UpstreamContractViolation (no JSON object in the reply).
    """
    if not settings.scoring_engine_api_key:
        raise ConfigurationError("SCORING_ENGINE_API_KEY is not configured")

    t0 = time.perf_counter()
    logger.info("engine_request_sent", model=settings.scoring_engine_model)
    try:
        response = await asyncio.wait_for(
            _post(payload, client, settings),
            timeout=settings.inference_timeout_sec,
        )
    except asyncio.TimeoutError as e:
        logger.error("engine_request_timeout", timeout_sec=settings.inference_timeout_sec)
        raise UpstreamUnavailableError(
            f"Scoring engine timed out after {settings.inference_timeout_sec:g}s"
        ) from e
    except httpx.TimeoutException as e:
        logger.error("engine_request_timeout", timeout_sec=settings.inference_timeout_sec)
        raise UpstreamUnavailableError(f"Scoring engine timed out: {e}") from e
    except httpx.HTTPError as e:
        logger.error("engine_request_failed", error=str(e))
        raise UpstreamUnavailableError(f"Scoring engine request failed: {e}") from e

    latency_ms = round((time.perf_counter() - t0) * 1000, 2)
    if not response.is_success:
        logger.error("engine_request_rejected", status_code=response.status_code, latency_ms=latency_ms)
        raise UpstreamUnavailableError(
            f"Scoring engine returned HTTP {response.status_code}",
            status_code=response.status_code,
        )
    try:
        body = response.json()
    except ValueError as e:
        raise UpstreamContractViolation("Scoring engine response is not JSON", raw_text=response.text) from e

    content = reply_content(body)
    try:
        decision = extract_json_object(content)
    except UpstreamContractViolation:
        logger.error("engine_reply_unparsable", raw_text=content[:500])
        raise
    logger.info("engine_reply_parsed", latency_ms=latency_ms)
    return decision, content
