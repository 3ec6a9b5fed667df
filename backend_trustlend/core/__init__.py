"""
Core utilities: domain exceptions and cross-cutting concerns shared by
collectors, the scoring-engine client and the API server.
"""
