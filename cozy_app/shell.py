"""
Application shell coordinator.

Wires configuration, the persistent store, a credential provider and the
phase controller together, and runs the form-level flows (validate →
provider → authenticate) the screens trigger.
"""

import asyncio
from pathlib import Path
from typing import Any, Optional

import structlog

from .auth.credentials import (
    Credentials,
    EmailCredentials,
    GuestCredentials,
    SignupCredentials,
    SocialSignupCredentials,
)
from .auth.provider import CredentialProvider, LocalCredentialProvider
from .auth.validation import CredentialValidator
from .config.defaults import DefaultConfig, get_default_config
from .config.loader import load_config
from .errors import AuthError, CredentialValidationError, StateTransitionError
from .logging.config import configure_logging
from .persistence.kv_store import KeyValueStore, create_store
from .state.controller import PhaseController
from .state.models import AppPhase, PhaseState, Profile, TransitionResult

logger = structlog.get_logger(__name__)


class AppShell:
    """
    Main coordinator for the phase-gated application.

    Startup runs the splash timer and the persisted-state resolution
    concurrently; the phase is available once both are done.
    """

    def __init__(
        self,
        store: KeyValueStore,
        provider: Optional[CredentialProvider] = None,
        config: Optional[DefaultConfig] = None
    ) -> None:
        self.config = config or get_default_config()
        self.store = store
        self.provider = provider or LocalCredentialProvider()
        self.validator = CredentialValidator(self.config.auth.min_password_length)
        self.controller = PhaseController(store, self.config.storage)
        self.logger = logger

    @classmethod
    def from_config(
        cls,
        config_dir: Optional[Path] = None,
        overrides: Optional[dict[str, Any]] = None,
        configure_logs: bool = True
    ) -> "AppShell":
        """Build a shell with the configured store backend and the local provider."""
        config = load_config(config_dir, overrides)

        if configure_logs:
            configure_logging(
                level=config.logging.level,
                format_json=config.logging.format_json,
                include_timestamp=config.logging.include_timestamp,
            )

        store = create_store(
            config.store.backend,
            config.store.db_path,
            timeout=config.store.timeout_seconds,
        )
        provider = LocalCredentialProvider(
            sign_in_latency=config.auth.sign_in_latency_seconds,
            guest_latency=config.auth.guest_latency_seconds,
            sign_up_latency=config.auth.sign_up_latency_seconds,
            social_latency=config.auth.social_latency_seconds,
        )
        return cls(store, provider, config)

    @property
    def state(self) -> PhaseState:
        return self.controller.state

    @property
    def phase(self) -> AppPhase:
        return self.controller.phase

    async def start(self) -> TransitionResult:
        """Show the splash for its configured duration while resolving the startup phase."""
        _, result = await asyncio.gather(
            asyncio.sleep(self.config.splash.duration_seconds),
            self.controller.resolve_startup_phase(),
        )
        self.logger.info("App shell started", phase=result.state.label)
        return result

    # Onboarding

    async def complete_onboarding(self) -> TransitionResult:
        return await self.controller.complete_onboarding()

    async def skip_onboarding(self) -> TransitionResult:
        """Skipping the introduction counts as completing it."""
        return await self.controller.complete_onboarding()

    # Authentication

    def navigate_to_signup(self) -> TransitionResult:
        return self.controller.navigate_to_signup()

    def back_to_signin(self) -> TransitionResult:
        return self.controller.back_to_signin()

    async def back_to_onboarding(self) -> TransitionResult:
        return await self.controller.back_to_onboarding()

    async def sign_in(self, email: str, password: str) -> TransitionResult:
        """Validate the sign-in form and authenticate with email credentials."""
        try:
            self.validator.validate_sign_in(email, password)
        except CredentialValidationError as e:
            return self._rejected("sign_in", e)
        return await self._login("sign_in", EmailCredentials(email.strip(), password))

    async def continue_as_guest(self) -> TransitionResult:
        return await self._login("continue_as_guest", GuestCredentials())

    async def sign_up(self, email: str, password: str, confirm_password: str) -> TransitionResult:
        """Validate the sign-up form and create an account."""
        try:
            self.validator.validate_sign_up(email, password, confirm_password)
        except CredentialValidationError as e:
            return self._rejected("sign_up", e)
        return await self._login("sign_up", SignupCredentials(email.strip(), password))

    async def social_sign_up(self, provider_name: str) -> TransitionResult:
        """Create an account through a social provider."""
        try:
            self.validator.validate_social_provider(provider_name)
        except CredentialValidationError as e:
            return self._rejected("social_sign_up", e)
        return await self._login("social_sign_up", SocialSignupCredentials(provider_name.strip()))

    # Home

    async def logout(self) -> TransitionResult:
        return await self.controller.logout()

    async def restart(self) -> TransitionResult:
        return await self.controller.restart()

    async def update_profile(self, profile: Profile) -> TransitionResult:
        return await self.controller.update_profile(profile)

    async def _login(self, trigger: str, credentials: Credentials) -> TransitionResult:
        if self.controller.phase != AppPhase.AUTH:
            return self._rejected(trigger, StateTransitionError(
                f"{trigger} is not allowed from {self.controller.state.label}",
                current_state=self.controller.state.label,
                attempted_transition=trigger
            ))

        try:
            outcome = await self.provider.authenticate(credentials)
        except AuthError as e:
            return self._rejected(trigger, e)

        return await self.controller.authenticate(outcome.token, outcome.profile)

    def _rejected(self, trigger: str, error: Exception) -> TransitionResult:
        self.logger.warning(
            "Credentials not accepted",
            trigger=trigger,
            error_type=type(error).__name__,
            error=str(error)
        )
        return TransitionResult(
            ok=False,
            state=self.controller.state,
            trigger=trigger,
            errors=(error,)
        )
