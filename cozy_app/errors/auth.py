"""
Credential error classifications.

Raised by credential providers and by the caller-side validation that
gates whether a provider is invoked at all.
"""

from typing import Optional


class AuthError(Exception):
    """Credential rejection or provider unavailability."""

    def __init__(self, message: str, reason: Optional[str] = None,
                 provider: Optional[str] = None):
        super().__init__(message)
        self.reason = reason
        self.provider = provider
        self.recoverable = True


class CredentialValidationError(ValueError):
    """User-supplied credentials failed local validation."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
