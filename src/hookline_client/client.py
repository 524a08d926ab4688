"""
Resilient call orchestrator.

Every outbound backend request goes through ``ResilientClient.execute``,
which runs one logical operation as a bounded sequence of attempts:

    1. Read the current credential from the TokenStore (every attempt)
    2. Send with the credential injected and a per-attempt deadline
    3. 2xx -> decode and return
    4. Anything else -> classify -> retry after backoff, or raise

Callers receive the decoded payload or a CanonicalError; attempt counts
and timing never leak out.

Usage:
    client = ResilientClient(transport, token_store, base_url="https://app/api")
    profile = await client.execute(Operation(path="/users/profile"), policy=CRITICAL)
"""

import asyncio
import json
import random
import time
from typing import Any, Awaitable, Callable, Dict, Optional, Union
from urllib.parse import urlencode

import structlog
from pydantic import BaseModel, ConfigDict, Field

from hookline_client.auth.token_store import TokenStore
from hookline_client.config import Settings
from hookline_client.errors.canonical import CanonicalError
from hookline_client.errors.classifier import classify
from hookline_client.errors.signals import (
    FailureSignal,
    TransportFailure,
    TransportFailureReason,
    UnrecognizedFailure,
    signal_from_exception,
    status_response_from_body,
)
from hookline_client.monitoring.events import CallObserver
from hookline_client.retry.policy import STANDARD, RetryPolicy
from hookline_client.retry.state import AttemptContext, CallState, next_transition
from hookline_client.transport.base import BaseTransport, TransportResponse

logger = structlog.get_logger(__name__)

DEFAULT_DEADLINE_MS = 30000


class Operation(BaseModel):
    """
    Descriptor of one logical backend operation.

    The descriptor is immutable and replayed verbatim on every attempt.
    """
    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Path relative to the API base URL")
    method: str = Field(default="GET", description="HTTP method")
    params: Optional[Dict[str, Any]] = Field(
        default=None, description="Query parameters; None values are dropped"
    )
    body: Optional[Any] = Field(default=None, description="JSON-serializable request body")
    headers: Dict[str, str] = Field(
        default_factory=dict, description="Extra headers, applied after the defaults"
    )
    name: Optional[str] = Field(default=None, description="Label for logs and metrics")

    @property
    def label(self) -> str:
        return self.name or f"{self.method.upper()} {self.path}"


class ResilientClient:
    """
    Executes operations with bounded retries and credential injection.

    Attributes:
        transport: Transport performing single requests
        token_store: Owner of the current credential
        base_url: API base URL (e.g. http://localhost:3000/api)
        default_policy: Policy used when a call site passes none
        deadline_ms: Default per-attempt deadline
    """

    def __init__(
        self,
        transport: BaseTransport,
        token_store: TokenStore,
        base_url: str = "",
        default_policy: RetryPolicy = STANDARD,
        deadline_ms: int = DEFAULT_DEADLINE_MS,
        observer: Optional[CallObserver] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the client.

        Args:
            transport: Transport performing single requests
            token_store: Owner of the current credential
            base_url: API base URL
            default_policy: Policy for call sites that pass none
            deadline_ms: Default per-attempt deadline in milliseconds
            observer: Event emitter (metrics on by default)
            sleep: Coroutine used for backoff delays (seconds)
            rng: Random source for backoff jitter
        """
        self.transport = transport
        self.token_store = token_store
        self.base_url = base_url.rstrip("/")
        self.default_policy = default_policy
        self.deadline_ms = deadline_ms
        self.observer = observer or CallObserver()
        self._sleep = sleep
        self._rng = rng

        logger.info(
            "ResilientClient initialized",
            base_url=self.base_url,
            deadline_ms=deadline_ms,
            max_attempts=default_policy.max_attempts,
            transport_class=transport.__class__.__name__,
        )

    @classmethod
    def from_settings(
        cls, transport: BaseTransport, token_store: TokenStore, settings: Settings, **kwargs
    ) -> "ResilientClient":
        """Build a client from configuration."""
        return cls(
            transport,
            token_store,
            base_url=settings.API_BASE_URL,
            default_policy=RetryPolicy.from_settings(settings),
            deadline_ms=settings.REQUEST_DEADLINE_MS,
            observer=CallObserver(metrics_enabled=settings.PROMETHEUS_ENABLED),
            **kwargs,
        )

    def build_url(self, operation: Operation) -> str:
        url = f"{self.base_url}{operation.path}"
        if operation.params:
            query = {k: v for k, v in operation.params.items() if v is not None}
            if query:
                url = f"{url}?{urlencode(query)}"
        return url

    @staticmethod
    def build_headers(token: Optional[str], operation: Operation) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        headers.update(operation.headers)
        return headers

    async def execute(
        self,
        operation: Operation,
        policy: Optional[RetryPolicy] = None,
        deadline_ms: Optional[int] = None,
    ) -> Any:
        """
        Execute one logical operation.

        Args:
            operation: Operation descriptor
            policy: Retry policy (client default when None)
            deadline_ms: Per-attempt deadline (client default when None)

        Returns:
            Decoded JSON payload, or None for an empty body

        Raises:
            CanonicalError: Non-retryable failure, or retries exhausted
            TypeError: The operation body is not JSON-serializable
        """
        context = AttemptContext(policy=policy or self.default_policy)
        deadline_ms = deadline_ms or self.deadline_ms
        label = operation.label
        # Encoded once before any attempt; serialization errors propagate to the caller.
        body = json.dumps(operation.body) if operation.body is not None else None
        start_time = time.monotonic()

        while True:
            attempt = context.attempt_number
            self.observer.attempt_started(label, attempt, context.policy.max_attempts)

            outcome = await self._attempt(operation, body, deadline_ms)
            if isinstance(outcome, TransportResponse):
                try:
                    payload = self._decode(outcome)
                except ValueError as e:
                    signal: FailureSignal = UnrecognizedFailure(
                        f"Invalid JSON response: {e}", cause=e
                    )
                else:
                    self.observer.call_succeeded(label, attempt, time.monotonic() - start_time)
                    return payload
            else:
                signal = outcome

            error = classify(signal)
            context.record_failure(error)
            self.observer.attempt_failed(label, attempt, context.policy.max_attempts, error)

            transition = next_transition(context, error, self._rng)
            if transition.state is CallState.FAILED:
                self.observer.call_failed(label, attempt, time.monotonic() - start_time, error)
                raise error

            self.observer.retry_scheduled(label, attempt, transition.delay_ms, error)
            await self._sleep(transition.delay_ms / 1000.0)
            context.advance()

    async def _attempt(
        self, operation: Operation, body: Optional[str], deadline_ms: int
    ) -> Union[TransportResponse, FailureSignal]:
        """
        Run a single attempt.

        Returns the 2xx response, or the failure signal describing why the
        attempt did not succeed.
        """
        try:
            token = await self.token_store.get()
            headers = self.build_headers(token, operation)

            response = await asyncio.wait_for(
                self.transport.send(
                    self.build_url(operation),
                    operation.method.upper(),
                    headers,
                    body,
                    deadline_ms,
                ),
                timeout=deadline_ms / 1000.0,
            )
        except asyncio.TimeoutError as e:
            return TransportFailure(
                reason=TransportFailureReason.DEADLINE_EXCEEDED,
                message=f"Request aborted after {deadline_ms}ms",
                cause=e,
            )
        except Exception as e:
            return signal_from_exception(e)

        if response.ok:
            return response

        return status_response_from_body(
            response.status,
            response.body,
            reason=response.reason,
            credential_present=any(k.lower() == "authorization" for k in headers),
        )

    @staticmethod
    def _decode(response: TransportResponse) -> Any:
        if not response.body or not response.body.strip():
            return None
        return json.loads(response.body)
