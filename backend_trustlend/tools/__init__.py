"""Command-line tools for Backend TrustLend."""
