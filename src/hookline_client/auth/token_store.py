"""
Token store: single owner of the current bearer credential.

The store holds at most one credential per process. The first ``get()``
hydrates it from durable storage; later reads are served from memory for
the rest of the process lifetime, even if storage held nothing. Writes go
to durable storage first, then to memory.

The store never infers expiry. It is replaced by the identity subsystem
and cleared on sign-out; everything else only reads it.
"""

import asyncio
from typing import Optional, Protocol

import structlog

logger = structlog.get_logger(__name__)


class TokenStorage(Protocol):
    """Durable key-value collaborator holding the credential."""

    async def read_token(self) -> Optional[str]:
        ...

    async def write_token(self, token: str) -> None:
        ...

    async def clear_token(self) -> None:
        ...


class TokenStore:
    """
    In-memory holder of the current credential with lazy hydration.

    Inject one instance into every client that needs the credential;
    there is no module-level token.

    Attributes:
        storage: Durable storage collaborator
    """

    def __init__(self, storage: TokenStorage):
        self.storage = storage
        self._token: Optional[str] = None
        self._hydrated = False
        self._hydrate_lock = asyncio.Lock()

    @property
    def is_hydrated(self) -> bool:
        return self._hydrated

    async def get(self) -> Optional[str]:
        """
        Return the current credential, or None.

        Performs at most one durable read per process; concurrent first
        readers wait on that single read.
        """
        if self._hydrated:
            return self._token

        async with self._hydrate_lock:
            if not self._hydrated:
                token = await self.storage.read_token()
                # A set() that completed during the read is newer than storage's answer.
                if self._hydrated:
                    logger.debug("Discarded stale hydration read")
                else:
                    self._token = token
                    self._hydrated = True
                    logger.debug("Hydrated credential from storage", present=token is not None)

        return self._token

    async def set(self, token: Optional[str]) -> None:
        """
        Replace the current credential; None clears it.

        Memory is only updated once durable storage accepted the write, so
        a failed write leaves the previous credential in place.
        """
        if token:
            await self.storage.write_token(token)
        else:
            await self.storage.clear_token()
            token = None

        self._token = token
        self._hydrated = True
        logger.info("Credential updated", present=token is not None)

    async def clear(self) -> None:
        """Drop the credential from memory and durable storage."""
        await self.set(None)
