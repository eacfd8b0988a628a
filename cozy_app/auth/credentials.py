"""Credential value types accepted by credential providers."""

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class EmailCredentials:
    """Sign in with an existing email/password account."""
    email: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class GuestCredentials:
    """Continue without an account."""


@dataclass(frozen=True)
class SignupCredentials:
    """Create an account with email and password."""
    email: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class SocialSignupCredentials:
    """Create an account through a third-party provider (google, apple, ...)."""
    provider: str


Credentials = Union[EmailCredentials, GuestCredentials, SignupCredentials, SocialSignupCredentials]
