"""
Backend TrustLend: reputation aggregation and underwriting decisions.

Collects developer, Q&A and on-chain signals for a borrower, asks an external
scoring engine for a trust score, and derives loan terms (tier, collateral
ratio, liquidation threshold, tenor pricing) from a fixed rubric.
"""

__version__ = "0.1.0"
