"""
Resilient backend client for Hookline.

Every outbound request to the backend passes through one client that:
- classifies failures into a closed error taxonomy (CanonicalError)
- retries transient failures with bounded, jittered exponential backoff
- injects the current bearer credential from a single-owner TokenStore
- enforces a per-attempt deadline

Architecture: httpx transport + Redis-backed credential storage + structlog/Prometheus observability
"""

__version__ = "0.1.0"
