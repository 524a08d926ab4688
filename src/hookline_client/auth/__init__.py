"""Credential ownership for outbound calls."""

from hookline_client.auth.token_store import TokenStorage, TokenStore

__all__ = [
    "TokenStorage",
    "TokenStore",
]
