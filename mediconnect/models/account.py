"""
Account, session and subscription models.

The session is an explicit value handed to every call that needs the
caller's identity; nothing in the package keeps a current user globally.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserIdentity(BaseModel):
    """
    Identity returned by the auth provider.
    """

    id: str
    email: str
    full_name: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        """Name to put on a new patient record."""
        return self.full_name or self.email or "Patient"

    @classmethod
    def from_provider(cls, payload: dict) -> "UserIdentity":
        """Build from the provider's user object (name lives in user_metadata)."""
        metadata = payload.get("user_metadata") or {}
        return cls(
            id=payload["id"],
            email=payload.get("email") or "",
            full_name=metadata.get("full_name"),
            created_at=payload.get("created_at"),
        )


class AuthSession(BaseModel):
    """
    An authenticated session.
    """

    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None
    user: UserIdentity

    @property
    def bearer(self) -> str:
        return f"Bearer {self.access_token}"


class AuthResult(BaseModel):
    """
    Result of a sign-up, sign-in, sign-out or session lookup.
    """

    success: bool = Field(description="Whether the call succeeded")
    session: Optional[AuthSession] = Field(default=None, description="Session when one was issued")
    user: Optional[UserIdentity] = Field(default=None, description="Identity when known")
    message: str = Field(default="", description="Human-readable result message")
    error_code: Optional[str] = Field(default=None, description="Error code if failed")


class SubscriptionStatus(BaseModel):
    """
    Subscription state reported by the billing function.
    """

    subscribed: bool = False
    subscription_tier: Optional[str] = None
    subscription_end: Optional[datetime] = None


class SubscriptionResult(BaseModel):
    """
    Result of a subscription check.
    """

    success: bool
    status: Optional[SubscriptionStatus] = None
    message: str = ""
    error_code: Optional[str] = None


class EmailResult(BaseModel):
    """
    Result of a transactional e-mail send.
    """

    success: bool
    skipped: bool = False
    message: str = ""
