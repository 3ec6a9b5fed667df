"""
API server package: HTTP interface for reputation profiles and underwriting decisions.

Validates requests, runs the underwriting pipeline per request and maps domain
errors to HTTP responses.
"""
