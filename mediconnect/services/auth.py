"""
Auth Service - Client for the managed backend's auth provider.

Every call returns an AuthResult instead of raising, so callers branch on
``result.success``. Sessions are returned to the caller and passed back
in explicitly; this module keeps no current-user state.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx
from loguru import logger

from mediconnect.config import Settings, get_settings
from mediconnect.models.account import AuthResult, AuthSession, UserIdentity
from mediconnect.services.email import EmailService, get_email_service

# Non-JSON bodies, non-object payloads and missing user fields
MALFORMED_PAYLOAD_ERRORS = (ValueError, KeyError, TypeError, AttributeError)


class AuthService:
    """
    Async client for sign-up, sign-in, sign-out and session lookup.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
        email_service: Optional[EmailService] = None,
    ):
        self.settings = settings or get_settings()
        self._client = client
        self._email_service = email_service or get_email_service()

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

    def _headers(self, access_token: Optional[str] = None) -> dict:
        headers = {"apikey": self.settings.backend_anon_key, "Content-Type": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def sign_up(self, email: str, password: str, full_name: str) -> AuthResult:
        """
        Register a new user and send the welcome e-mail.

        The e-mail is best effort: its failure is logged and never turns a
        successful sign-up into a failed one.
        """
        result = await self._call(
            "POST",
            "/auth/v1/signup",
            json={"email": email, "password": password, "data": {"full_name": full_name}},
        )
        if not result.success:
            return result

        email_result = await self._email_service.send_welcome_email(email, full_name)
        if not email_result.success:
            logger.warning(f"Welcome email failed for {email}: {email_result.message}")

        return result

    async def sign_in(self, email: str, password: str) -> AuthResult:
        """Sign in with e-mail and password."""
        return await self._call(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )

    async def sign_out(self, session: AuthSession) -> AuthResult:
        """Revoke a session."""
        client = await self._get_client()
        try:
            response = await client.post(
                "/auth/v1/logout", headers=self._headers(session.access_token)
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Sign-out failed: {e}")
            return AuthResult(success=False, message="Failed to sign out", error_code="SIGN_OUT_FAILED")
        return AuthResult(success=True, message="Signed out")

    async def get_session(self, access_token: str) -> AuthResult:
        """
        Look up the user behind an access token.

        Returns:
            AuthResult carrying a session for that token, or a failure when
            the token is missing, expired or rejected
        """
        if not access_token:
            return AuthResult(success=False, message="Not signed in", error_code="NO_SESSION")

        client = await self._get_client()
        try:
            response = await client.get("/auth/v1/user", headers=self._headers(access_token))
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Session lookup rejected: {e.response.status_code}")
            return AuthResult(success=False, message="Session expired", error_code="NO_SESSION")
        except httpx.RequestError as e:
            logger.error(f"Session lookup failed: {e}")
            return AuthResult(success=False, message="Network error", error_code="NETWORK_ERROR")

        try:
            user = UserIdentity.from_provider(response.json())
        except MALFORMED_PAYLOAD_ERRORS as e:
            logger.error(f"Malformed session response: {e!r}")
            return _malformed_response()
        return AuthResult(
            success=True,
            session=AuthSession(access_token=access_token, user=user),
            user=user,
        )

    async def _call(self, method: str, path: str, **kwargs) -> AuthResult:
        client = await self._get_client()
        try:
            response = await client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Auth request error on {path}: {e}")
            return AuthResult(success=False, message="Network error", error_code="NETWORK_ERROR")

        if response.is_error:
            message = _provider_message(response)
            logger.warning(f"Auth provider rejected {path}: {message}")
            return AuthResult(success=False, message=message, error_code=_error_code(message))

        try:
            return _result_from_payload(response.json())
        except MALFORMED_PAYLOAD_ERRORS as e:
            logger.error(f"Malformed auth response on {path}: {e!r}")
            return _malformed_response()


def _malformed_response() -> AuthResult:
    return AuthResult(
        success=False,
        message="Authentication failed",
        error_code="MALFORMED_RESPONSE",
    )


def _result_from_payload(payload: dict) -> AuthResult:
    # Sign-up without auto-confirm returns the bare user object
    if "access_token" not in payload:
        user = UserIdentity.from_provider(payload.get("user") or payload)
        return AuthResult(success=True, user=user, message="Check your email to confirm your account")

    user = UserIdentity.from_provider(payload["user"])
    expires_at = None
    if payload.get("expires_in"):
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=payload["expires_in"])
    session = AuthSession(
        access_token=payload["access_token"],
        refresh_token=payload.get("refresh_token"),
        expires_at=expires_at,
        user=user,
    )
    return AuthResult(success=True, session=session, user=user, message="Signed in")


def _provider_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return "Authentication failed"
    if not isinstance(payload, dict):
        return "Authentication failed"
    return (
        payload.get("msg")
        or payload.get("error_description")
        or payload.get("message")
        or "Authentication failed"
    )


def _error_code(message: str) -> str:
    lowered = message.lower()
    if "already registered" in lowered:
        return "USER_EXISTS"
    if "invalid login credentials" in lowered:
        return "INVALID_CREDENTIALS"
    return "AUTH_ERROR"


# Singleton instance
_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get the singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
