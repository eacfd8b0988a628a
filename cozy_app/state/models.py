"""
Phase state data models for the app shell.

This module defines immutable data structures for the application phase,
the persisted flags it is derived from, the user profile and the typed
outcome returned by every controller operation.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional


class AppPhase(str, Enum):
    """Mutually exclusive top-level phases."""
    SPLASH = "splash"
    ONBOARDING = "onboarding"
    AUTH = "auth"
    HOME = "home"


class AuthMode(str, Enum):
    """Sub-state of the AUTH phase."""
    SIGN_IN = "sign_in"
    SIGN_UP = "sign_up"


@dataclass(frozen=True)
class Profile:
    """User profile persisted alongside the auth token."""

    email: Optional[str] = None
    signup_method: Optional[str] = None
    join_date: Optional[str] = None                 # ISO-8601, UTC
    user_id: Optional[str] = None

    def with_changes(self, **changes: Any) -> 'Profile':
        """Return a new profile with the given fields replaced."""
        return replace(self, **changes)


@dataclass(frozen=True)
class PersistedState:
    """Flags as read from the key-value store."""

    onboarded: bool = False
    auth_token: Optional[str] = None
    profile: Optional[Profile] = None

    @property
    def authenticated(self) -> bool:
        return bool(self.auth_token)


@dataclass(frozen=True)
class PhaseState:
    """Snapshot of the phase the application is in."""

    phase: AppPhase = AppPhase.SPLASH
    auth_mode: AuthMode = AuthMode.SIGN_IN
    profile: Optional[Profile] = None

    @property
    def label(self) -> str:
        """Phase name including the auth sub-state, e.g. ``auth:sign_up``."""
        if self.phase == AppPhase.AUTH:
            return f"{self.phase.value}:{self.auth_mode.value}"
        return self.phase.value

    def with_phase(self, phase: AppPhase,
                   auth_mode: AuthMode = AuthMode.SIGN_IN) -> 'PhaseState':
        """Move to a new phase; the auth sub-state only survives inside AUTH."""
        if phase != AppPhase.AUTH:
            auth_mode = AuthMode.SIGN_IN
        return PhaseState(phase=phase, auth_mode=auth_mode, profile=self.profile)

    def with_profile(self, profile: Optional[Profile]) -> 'PhaseState':
        return PhaseState(phase=self.phase, auth_mode=self.auth_mode, profile=profile)


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a controller operation."""

    ok: bool
    state: PhaseState
    trigger: str
    errors: tuple[Exception, ...] = field(default_factory=tuple)

    @property
    def phase(self) -> AppPhase:
        return self.state.phase

    @property
    def complete(self) -> bool:
        """True when the transition committed without any reported failure."""
        return self.ok and not self.errors

    @property
    def error(self) -> Optional[Exception]:
        """First reported failure, if any."""
        return self.errors[0] if self.errors else None
