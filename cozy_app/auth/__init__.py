"""Credential types, caller-side validation and credential providers."""

from .credentials import (
    Credentials,
    EmailCredentials,
    GuestCredentials,
    SignupCredentials,
    SocialSignupCredentials,
)
from .provider import AuthOutcome, CredentialProvider, LocalCredentialProvider

__all__ = [
    "AuthOutcome",
    "CredentialProvider",
    "Credentials",
    "EmailCredentials",
    "GuestCredentials",
    "LocalCredentialProvider",
    "SignupCredentials",
    "SocialSignupCredentials",
]
