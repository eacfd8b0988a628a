"""
Credential providers.

A provider turns credentials into an auth token and, optionally, a user
profile. The phase controller never talks to a provider directly; the
app shell calls one and hands the outcome to the controller.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional

import structlog

from ..errors import AuthError
from ..state.models import Profile
from ..utils.time import epoch_millis, format_timestamp, utc_now
from .credentials import (
    Credentials,
    EmailCredentials,
    GuestCredentials,
    SignupCredentials,
    SocialSignupCredentials,
)

logger = structlog.get_logger(__name__)

GUEST_TOKEN = "guest_token"


@dataclass(frozen=True)
class AuthOutcome:
    """Token and optional profile returned by a provider."""
    token: str
    profile: Optional[Profile] = None


class CredentialProvider(ABC):
    """Authenticates credentials against some backend."""

    @abstractmethod
    async def authenticate(self, credentials: Credentials) -> AuthOutcome:
        """
        Exchange credentials for a token.

        Raises:
            AuthError: If the credentials are rejected or the backend is unavailable
        """


class LocalCredentialProvider(CredentialProvider):
    """
    Provider that issues tokens locally, with optional simulated latency.

    Stands in for a real backend in demos and tests: every credential is
    accepted except emails listed in rejected_emails.
    """

    def __init__(
        self,
        sign_in_latency: float = 0.0,
        guest_latency: float = 0.0,
        sign_up_latency: float = 0.0,
        social_latency: float = 0.0,
        rejected_emails: Optional[Iterable[str]] = None
    ):
        self.sign_in_latency = sign_in_latency
        self.guest_latency = guest_latency
        self.sign_up_latency = sign_up_latency
        self.social_latency = social_latency
        self.rejected_emails = {e.lower() for e in (rejected_emails or [])}
        self.logger = logger

    async def authenticate(self, credentials: Credentials) -> AuthOutcome:
        if isinstance(credentials, EmailCredentials):
            await asyncio.sleep(self.sign_in_latency)
            self._check_email(credentials.email, "email")
            return AuthOutcome(token=f"token_{credentials.email}_{epoch_millis()}")

        if isinstance(credentials, GuestCredentials):
            await asyncio.sleep(self.guest_latency)
            return AuthOutcome(token=GUEST_TOKEN)

        if isinstance(credentials, SignupCredentials):
            await asyncio.sleep(self.sign_up_latency)
            self._check_email(credentials.email, "email")
            return self._new_account(credentials.email, "email")

        if isinstance(credentials, SocialSignupCredentials):
            await asyncio.sleep(self.social_latency)
            email = f"user@{credentials.provider}.com"
            self._check_email(email, credentials.provider)
            return self._new_account(email, credentials.provider)

        raise AuthError(
            f"Unsupported credentials: {type(credentials).__name__}",
            reason="unsupported_credentials"
        )

    def _check_email(self, email: str, provider: str) -> None:
        if email.lower() in self.rejected_emails:
            self.logger.warning("Credentials rejected", email=email, provider=provider)
            raise AuthError(
                f"Credentials rejected for {email}",
                reason="rejected",
                provider=provider
            )

    def _new_account(self, email: str, signup_method: str) -> AuthOutcome:
        now = utc_now()
        millis = epoch_millis(now)
        profile = Profile(
            email=email,
            signup_method=signup_method,
            join_date=format_timestamp(now),
            user_id=str(millis),
        )
        self.logger.info("Account created", email=email, signup_method=signup_method)
        return AuthOutcome(token=f"signup_token_{millis}", profile=profile)
