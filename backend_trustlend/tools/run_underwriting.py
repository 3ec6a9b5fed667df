#!/usr/bin/env python3
"""
Run the underwriting pipeline once from the command line and print JSON.

Usage:
  py -m backend_trustlend.tools.run_underwriting --github octocat --stackoverflow 22656 \\
      --wallet <base58 address> --asset SOL
  py -m backend_trustlend.tools.run_underwriting --github octocat --profile-only

Requires .env with SCORING_ENGINE_API_KEY (not needed with --profile-only) and
HELIUS_API_KEY or SOLANA_RPC_URL for on-chain data.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from backend_trustlend.analytics.underwriting_pipeline import build_reputation_profile, run_underwriting
from backend_trustlend.collectors import ReputationRequest
from backend_trustlend.core.exceptions import TrustLendError
from backend_trustlend.trustlend_logging import get_logger

logger = get_logger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="TrustLend underwriting for one borrower.")
    parser.add_argument("--github", dest="developer_id", help="GitHub username")
    parser.add_argument("--stackoverflow", dest="qa_id", help="StackOverflow user id")
    parser.add_argument("--wallet", dest="wallet_address", help="Solana wallet address")
    parser.add_argument("--asset", dest="collateral_asset", help="Collateral asset, e.g. SOL, SPY")
    parser.add_argument("--profile-only", action="store_true", help="Only aggregate the reputation profile")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> dict:
    request = ReputationRequest.from_values(args.developer_id, args.qa_id, args.wallet_address)
    if args.profile_only:
        profile = await build_reputation_profile(request)
        return profile.to_dict()
    result = await run_underwriting(request, args.collateral_asset)
    return result.to_dict()


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        output = asyncio.run(_run(args))
    except TrustLendError as e:
        logger.error("run_underwriting_failed", error_type=e.error_type, error=e.message)
        print(json.dumps(e.to_dict(), indent=2), file=sys.stderr)
        return 1
    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
