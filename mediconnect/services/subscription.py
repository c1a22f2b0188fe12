"""
Subscription Service - Wearable band subscription status.

Billing lives in the backend's serverless functions; this client invokes
them with the user's bearer token.
"""

from typing import Optional

import httpx
from loguru import logger

from mediconnect.config import Settings, get_settings
from mediconnect.exceptions import BackendError
from mediconnect.models.account import AuthSession, SubscriptionResult, SubscriptionStatus


class SubscriptionService:
    """
    Async client for the check-subscription and customer-portal functions.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.settings.backend_url,
                timeout=httpx.Timeout(self.settings.backend_timeout),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _invoke(self, function: str, session: AuthSession) -> dict:
        client = await self._get_client()
        try:
            response = await client.post(
                f"/functions/v1/{function}",
                headers={"apikey": self.settings.backend_anon_key, "Authorization": session.bearer},
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Function {function} failed: {e}")
            raise BackendError(f"{function} failed", e.response.status_code) from e
        except ValueError as e:
            logger.error(f"Function {function} returned a non-JSON body: {e}")
            raise BackendError(f"{function} returned an invalid response", response.status_code) from e
        except httpx.RequestError as e:
            logger.error(f"Function {function} unreachable: {e}")
            raise BackendError(f"{function} unreachable") from e

    async def check_subscription(self, session: AuthSession) -> SubscriptionResult:
        """
        Fetch the current subscription status.

        Returns:
            SubscriptionResult with status, tier and renewal date on success
        """
        try:
            payload = await self._invoke("check-subscription", session)
            status = SubscriptionStatus(**payload)
        except BackendError:
            return SubscriptionResult(
                success=False,
                message="Failed to load subscription details.",
                error_code="SUBSCRIPTION_CHECK_FAILED",
            )
        except (ValueError, TypeError) as e:
            logger.error(f"Malformed subscription payload: {e}")
            return SubscriptionResult(
                success=False,
                message="Failed to load subscription details.",
                error_code="MALFORMED_RESPONSE",
            )

        logger.info(
            f"Subscription for {session.user.id}: subscribed={status.subscribed} "
            f"tier={status.subscription_tier}"
        )
        return SubscriptionResult(success=True, status=status)

    async def customer_portal_url(self, session: AuthSession) -> str:
        """
        Get a link to the billing customer portal.

        Raises:
            BackendError: If the function fails or returns no URL
        """
        payload = await self._invoke("customer-portal", session)
        url = payload.get("url") if isinstance(payload, dict) else None
        if not url:
            raise BackendError("customer-portal returned no URL")
        return url


# Singleton instance
_subscription_service: Optional[SubscriptionService] = None


def get_subscription_service() -> SubscriptionService:
    """Get the singleton subscription service instance."""
    global _subscription_service
    if _subscription_service is None:
        _subscription_service = SubscriptionService()
    return _subscription_service
