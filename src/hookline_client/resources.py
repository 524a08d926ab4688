"""
Backend resources exposed to the application.

One method per logical backend resource, each routed through
``ResilientClient.execute`` with the policy its call site needs:
- CRITICAL for calls that block a user-visible workflow (token
  verification and refresh, profile read/write)
- ADVISORY for non-essential status checks
- the client's default (standard) policy for everything else
"""

from typing import Any, Dict, Optional

import structlog

from hookline_client.auth.token_store import TokenStore
from hookline_client.client import Operation, ResilientClient
from hookline_client.config import Settings, get_settings
from hookline_client.logging_config import configure_logging
from hookline_client.persistence.token_storage import RedisTokenStorage
from hookline_client.retry.policy import ADVISORY, CRITICAL
from hookline_client.transport.httpx_transport import HttpxTransport

logger = structlog.get_logger(__name__)


def _bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _page(page: Optional[int], limit: Optional[int]) -> Dict[str, Any]:
    return {"page": page, "limit": limit}


class _Resource:
    def __init__(self, client: ResilientClient):
        self.client = client

    async def _call(self, name: str, path: str, method: str = "GET", **kwargs) -> Any:
        policy = kwargs.pop("policy", None)
        operation = Operation(name=name, path=path, method=method, **kwargs)
        return await self.client.execute(operation, policy=policy)


class AuthResource(_Resource):
    """Session endpoints. Owns writes to the TokenStore on refresh and sign-out."""

    def __init__(self, client: ResilientClient, token_store: TokenStore):
        super().__init__(client)
        self.token_store = token_store

    async def verify_token(self, id_token: str) -> Any:
        """Verify an identity-provider token with the backend."""
        return await self._call(
            "auth.verify_token", "/auth/verify", headers=_bearer(id_token), policy=CRITICAL
        )

    async def refresh_token(self) -> Optional[str]:
        """Exchange the current credential for a fresh one and store it."""
        data = await self._call("auth.refresh_token", "/auth/refresh", "POST", policy=CRITICAL)
        token = data.get("token") if isinstance(data, dict) else None
        if token:
            await self.token_store.set(token)
        return token

    async def sign_out(self) -> None:
        """Sign out on the backend; the local credential is cleared either way."""
        try:
            await self._call("auth.sign_out", "/auth/signout", "POST")
        finally:
            await self.token_store.clear()

    async def check_status(self, id_token: Optional[str] = None) -> Any:
        return await self._call(
            "auth.check_status",
            "/auth/status",
            headers=_bearer(id_token) if id_token else {},
            policy=ADVISORY,
        )


class UserResource(_Resource):
    async def get_profile(self) -> Any:
        return await self._call("users.get_profile", "/users/profile", policy=CRITICAL)

    async def update_profile(self, data: Dict[str, Any]) -> Any:
        return await self._call(
            "users.update_profile", "/users/profile", "PUT", body=data, policy=CRITICAL
        )

    async def complete_onboarding(self, data: Dict[str, Any]) -> Any:
        return await self._call("users.complete_onboarding", "/users/onboarding", "POST", body=data)

    async def get_usage(self) -> Any:
        return await self._call("users.get_usage", "/users/usage")

    async def delete_account(self) -> None:
        await self._call("users.delete_account", "/users/profile", "DELETE")


class HooksResource(_Resource):
    """Hook generation, history and favorites."""

    async def generate_hooks(self, data: Dict[str, Any]) -> Any:
        return await self._call("hooks.generate", "/hooks/generate/enhanced", "POST", body=data)

    async def get_generation(self, generation_id: str) -> Any:
        return await self._call("hooks.get_generation", f"/hooks/generations/{generation_id}")

    async def get_history(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        platform: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Any:
        params = {
            **_page(page, limit),
            "platform": platform,
            "startDate": start_date,
            "endDate": end_date,
        }
        return await self._call("hooks.get_history", "/hooks/history", params=params)

    async def add_to_favorites(self, data: Dict[str, Any]) -> Any:
        return await self._call("hooks.add_favorite", "/hooks/favorites", "POST", body=data)

    async def remove_from_favorites(self, favorite_id: str) -> None:
        await self._call("hooks.remove_favorite", f"/hooks/favorites/{favorite_id}", "DELETE")

    async def get_favorites(self, page: Optional[int] = None, limit: Optional[int] = None) -> Any:
        return await self._call("hooks.get_favorites", "/hooks/favorites", params=_page(page, limit))

    async def delete_generation(self, generation_id: str) -> None:
        await self._call(
            "hooks.delete_generation", f"/hooks/generations/{generation_id}", "DELETE"
        )


class PaymentsResource(_Resource):
    async def get_plans(self) -> Any:
        return await self._call("payments.get_plans", "/payments/plans")

    async def create_checkout_session(self, data: Dict[str, Any]) -> Any:
        return await self._call("payments.checkout", "/payments/checkout", "POST", body=data)

    async def create_billing_portal(self, data: Dict[str, Any]) -> Any:
        return await self._call(
            "payments.billing_portal", "/payments/billing-portal", "POST", body=data
        )

    async def get_payment_history(
        self, page: Optional[int] = None, limit: Optional[int] = None
    ) -> Any:
        return await self._call(
            "payments.get_history", "/payments/history", params=_page(page, limit)
        )

    async def get_subscription_overview(self) -> Any:
        return await self._call("payments.get_subscription", "/payments/subscription")

    async def cancel_subscription(self) -> None:
        await self._call("payments.cancel_subscription", "/payments/subscription/cancel", "POST")

    async def resume_subscription(self) -> None:
        await self._call("payments.resume_subscription", "/payments/subscription/resume", "POST")


class AnalyticsResource(_Resource):
    async def track_event(self, event: Dict[str, Any]) -> None:
        await self._call("analytics.track", "/analytics/track", "POST", body=event)

    async def get_overview(self, period: str = "30d") -> Any:
        return await self._call("analytics.overview", "/analytics/overview", params={"period": period})

    async def get_usage_analytics(self, period: str = "30d") -> Any:
        return await self._call("analytics.usage", "/analytics/usage", params={"period": period})

    async def get_performance_metrics(self, period: str = "30d") -> Any:
        return await self._call(
            "analytics.performance", "/analytics/performance", params={"period": period}
        )


class HealthResource(_Resource):
    async def check(self) -> Any:
        return await self._call("health.check", "/health")


class BackendApi:
    """
    All backend resources behind one resilient client.

    Attributes:
        client: Shared ResilientClient
        token_store: Shared TokenStore
    """

    def __init__(self, client: ResilientClient, token_store: TokenStore):
        self.client = client
        self.token_store = token_store
        self.auth = AuthResource(client, token_store)
        self.user = UserResource(client)
        self.hooks = HooksResource(client)
        self.payments = PaymentsResource(client)
        self.analytics = AnalyticsResource(client)
        self.health = HealthResource(client)

    async def close(self) -> None:
        await self.client.transport.close()


def create_backend_api(settings: Optional[Settings] = None) -> BackendApi:
    """
    Wire the production stack: httpx transport, Redis-backed TokenStore
    and a ResilientClient configured from settings.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)

    storage = RedisTokenStorage.from_settings(settings)
    token_store = TokenStore(storage)
    transport = HttpxTransport.from_settings(settings)
    client = ResilientClient.from_settings(transport, token_store, settings)

    logger.info("Backend API created", base_url=settings.API_BASE_URL)
    return BackendApi(client, token_store)
