"""
Error classification for the Cozy app shell.

Expected failure modes (storage, credentials, malformed persisted data,
precondition violations) are modelled here so the phase controller can
return them inside typed results instead of raising past its boundary.
"""

from .storage import (
    StoreError,
    ParseError,
)
from .auth import (
    AuthError,
    CredentialValidationError,
)
from .system_failures import (
    StateTransitionError,
    ConfigurationError,
)

__all__ = [
    # Storage Errors
    "StoreError",
    "ParseError",
    # Credential Errors
    "AuthError",
    "CredentialValidationError",
    # System Failures
    "StateTransitionError",
    "ConfigurationError",
]
