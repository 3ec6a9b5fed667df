"""
Environment variable loading and URL resolution for TrustLend.

- SOLANA_RPC_URL: ledger RPC endpoint (wins when set)
- HELIUS_API_KEY: Helius API key (used to build the RPC URL otherwise)
- GITHUB_API_URL / STACKEXCHANGE_API_URL: Web2 reputation sources
- SCORING_ENGINE_API_URL / SCORING_ENGINE_API_KEY: chat-completions scoring engine
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

# Project root: config is backend_trustlend/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

MAINNET_RPC_URL = "https://api.mainnet-beta.solana.com"
HELIUS_MAINNET_URL_TEMPLATE = "https://mainnet.helius-rpc.com/?api-key={key}"

DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_STACKEXCHANGE_API_URL = "https://api.stackexchange.com/2.3"
DEFAULT_SCORING_ENGINE_API_URL = "https://hackeurope.crusoecloud.com/v1/chat/completions"
DEFAULT_SCORING_ENGINE_MODEL = "NVFP4/Qwen3-235B-A22B-Instruct-2507-FP4"


def load_trustlend_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    from dotenv import load_dotenv

    load_dotenv(_ENV_PATH)


def env_str(name: str, default: str = "") -> str:
    """Return a stripped env var, falling back to default when unset or blank."""
    return (os.getenv(name) or "").strip() or default


def env_float(name: str, default: float) -> float:
    """Return env var as float; blank or unparsable values fall back to default."""
    raw = env_str(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def get_ledger_rpc_url() -> str:
    """
    Resolve the Solana ledger RPC URL from env.
    Order: SOLANA_RPC_URL > HELIUS_API_KEY (mainnet template) > public mainnet RPC.
    """
    load_trustlend_env()
    url = env_str("SOLANA_RPC_URL")
    if url:
        return url
    key = env_str("HELIUS_API_KEY")
    if key:
        return HELIUS_MAINNET_URL_TEMPLATE.format(key=key)
    return MAINNET_RPC_URL


def mask_secret_url(url: str) -> str:
    """Mask an api-key query parameter so the URL is safe to log."""
    if "api-key=" in url:
        return url.split("api-key=")[0] + "api-key=***"
    return url
