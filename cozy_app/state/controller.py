"""
Phase controller for the app shell.

The controller is the single writer of PhaseState. Every transition that
touches storage issues its store operations, joins their outcomes and only
then decides the resulting phase, so in-memory state never runs ahead of
what the store confirmed. The one deliberate exception is restart(), which
resets the phase even when the batched removal reports a failure.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional, Sequence

import structlog

from ..config.defaults import StorageKeys
from ..errors import ParseError, StateTransitionError, StoreError
from ..logging.config import get_state_logger, log_phase_transition, log_transition_failure
from ..persistence.kv_store import KeyValueStore
from .models import AppPhase, AuthMode, PersistedState, PhaseState, Profile, TransitionResult
from .resolution import ONBOARDED_VALUE, decode_persisted_state, resolve_phase, serialize_profile

logger = structlog.get_logger(__name__)
state_logger = get_state_logger(__name__)

PhaseListener = Callable[[PhaseState], None]


class PhaseController:
    """Owns the authoritative application phase and its persistence."""

    def __init__(self, store: KeyValueStore, keys: Optional[StorageKeys] = None):
        self.store = store
        self.keys = keys or StorageKeys()
        self.logger = logger
        self.state_logger = state_logger
        self._state = PhaseState()
        self._listeners: list[PhaseListener] = []
        # Token and profile the store may still hold, as last confirmed or left behind
        self._stored = PersistedState()

    @property
    def state(self) -> PhaseState:
        return self._state

    @property
    def phase(self) -> AppPhase:
        return self._state.phase

    @property
    def profile(self) -> Optional[Profile]:
        return self._state.profile

    def add_listener(self, listener: PhaseListener) -> Callable[[], None]:
        """Register a callback for committed state changes. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    async def resolve_startup_phase(self) -> TransitionResult:
        """
        Leave SPLASH for the phase dictated by persisted flags.

        The three keys are read concurrently. A failed read or a malformed
        profile resolves to ONBOARDING with every flag treated as unset.
        """
        trigger = "resolve_startup_phase"
        blocked = self._require(trigger, AppPhase.SPLASH)
        if blocked:
            return blocked

        reads = await asyncio.gather(
            self._read(self.keys.onboarded_key),
            self._read(self.keys.token_key),
            self._read(self.keys.profile_key),
        )

        read_errors = [error for _, error in reads if error is not None]
        if read_errors:
            self.logger.warning(
                "Startup read failed, falling back to onboarding",
                failed_keys=[e.target for e in read_errors]
            )
            return self._commit(
                PhaseState(phase=AppPhase.ONBOARDING),
                trigger,
                errors=read_errors,
                context={"fail_closed": True, "reason": "store_error"}
            )

        (onboarded, _), (token, _), (raw_profile, _) = reads
        try:
            persisted = decode_persisted_state(onboarded, token, raw_profile)
        except ParseError as e:
            self.logger.warning(
                "Persisted profile is malformed, falling back to onboarding",
                error=str(e)
            )
            return self._commit(
                PhaseState(phase=AppPhase.ONBOARDING),
                trigger,
                context={"fail_closed": True, "reason": "parse_error"}
            )

        self._stored = persisted
        phase = resolve_phase(persisted)
        profile = persisted.profile if phase == AppPhase.HOME else None

        return self._commit(
            PhaseState(phase=phase, profile=profile),
            trigger,
            context={
                "onboarded": persisted.onboarded,
                "authenticated": persisted.authenticated,
                "has_profile": profile is not None,
            }
        )

    async def complete_onboarding(self) -> TransitionResult:
        """
        Persist the onboarded flag, then move to AUTH(SIGN_IN).

        A token still held by the store (left over from a partial restart,
        or present at startup without the flag) leads straight to HOME,
        the phase a cold start would resolve.
        """
        trigger = "complete_onboarding"
        blocked = self._require(trigger, AppPhase.ONBOARDING)
        if blocked:
            return blocked

        error = await self._attempt(self.store.set(self.keys.onboarded_key, ONBOARDED_VALUE))
        if error:
            return self._fail(trigger, [error])

        stored = PersistedState(
            onboarded=True,
            auth_token=self._stored.auth_token,
            profile=self._stored.profile,
        )
        phase = resolve_phase(stored)
        profile = stored.profile if phase == AppPhase.HOME else None
        return self._commit(
            PhaseState(phase=phase, profile=profile),
            trigger,
            context={"authenticated": stored.authenticated}
        )

    def navigate_to_signup(self) -> TransitionResult:
        """Switch the AUTH sub-state to SIGN_UP. In-memory only."""
        return self._set_auth_mode("navigate_to_signup", AuthMode.SIGN_UP)

    def back_to_signin(self) -> TransitionResult:
        """Switch the AUTH sub-state back to SIGN_IN. In-memory only."""
        return self._set_auth_mode("back_to_signin", AuthMode.SIGN_IN)

    async def authenticate(self, token: str, profile: Optional[Profile] = None) -> TransitionResult:
        """
        Persist credentials and move to HOME.

        Token and profile are written concurrently. A failed token write
        keeps the phase in AUTH. A failed profile write still moves to
        HOME, in guest mode, and is reported in the result errors.
        """
        trigger = "authenticate"
        blocked = self._require(trigger, AppPhase.AUTH)
        if blocked:
            return blocked

        if not token:
            return self._fail(trigger, [StateTransitionError(
                "Auth token must be a non-empty string",
                current_state=self._state.label,
                attempted_transition=AppPhase.HOME.value
            )])

        writes = [self._attempt(self.store.set(self.keys.token_key, token))]
        if profile is not None:
            writes.append(self._attempt(
                self.store.set(self.keys.profile_key, serialize_profile(profile))
            ))

        outcomes = await asyncio.gather(*writes)
        token_error = outcomes[0]
        profile_error = outcomes[1] if len(outcomes) > 1 else None

        if token_error:
            return self._fail(trigger, [e for e in outcomes if e is not None])

        self._stored = PersistedState(
            onboarded=True,
            auth_token=token,
            profile=profile if profile is not None and not profile_error else self._stored.profile,
        )

        errors = []
        if profile_error:
            self.logger.warning(
                "Profile write failed, continuing without profile",
                error=str(profile_error)
            )
            errors.append(profile_error)
            profile = None

        return self._commit(
            self._state.with_phase(AppPhase.HOME).with_profile(profile),
            trigger,
            errors=errors,
            context={"guest": profile is None, "auth_mode": self._state.auth_mode.value}
        )

    async def logout(self) -> TransitionResult:
        """
        Remove token and profile, then move to AUTH(SIGN_IN).

        Both removals are always attempted. The phase stays HOME unless
        the store confirmed both.
        """
        trigger = "logout"
        blocked = self._require(trigger, AppPhase.HOME)
        if blocked:
            return blocked

        outcomes = await asyncio.gather(
            self._attempt(self.store.remove(self.keys.token_key)),
            self._attempt(self.store.remove(self.keys.profile_key)),
        )
        errors = [e for e in outcomes if e is not None]
        if errors:
            return self._fail(trigger, errors)

        self._stored = PersistedState(onboarded=True)
        return self._commit(
            self._state.with_phase(AppPhase.AUTH).with_profile(None), trigger
        )

    async def back_to_onboarding(self) -> TransitionResult:
        """Remove the onboarded flag, then move to ONBOARDING."""
        trigger = "back_to_onboarding"
        blocked = self._require(trigger, AppPhase.AUTH)
        if blocked:
            return blocked

        error = await self._attempt(self.store.remove(self.keys.onboarded_key))
        if error:
            return self._fail(trigger, [error])

        return self._commit(self._state.with_phase(AppPhase.ONBOARDING), trigger)

    async def restart(self) -> TransitionResult:
        """
        Clear all persisted keys in one batch and reset to ONBOARDING.

        The reset is optimistic: the phase becomes ONBOARDING even when
        the batch reports a failure, which is returned in the errors.
        """
        trigger = "restart"
        blocked = self._require(trigger, AppPhase.HOME)
        if blocked:
            return blocked

        error = await self._attempt(self.store.remove_many([
            self.keys.onboarded_key,
            self.keys.token_key,
            self.keys.profile_key,
        ]))

        errors = []
        failed_keys: set[str] = set()
        if error:
            self.logger.warning(
                "Restart could not confirm removal of all keys, resetting anyway",
                failed_keys=error.failed_keys,
                error=str(error)
            )
            errors.append(error)
            failed_keys = set(error.failed_keys)

        # Keys the batch could not remove stay in play for complete_onboarding
        self._stored = PersistedState(
            auth_token=self._stored.auth_token if self.keys.token_key in failed_keys else None,
            profile=self._stored.profile if self.keys.profile_key in failed_keys else None,
        )

        return self._commit(
            PhaseState(phase=AppPhase.ONBOARDING),
            trigger,
            errors=errors,
            context={"optimistic": bool(errors)}
        )

    async def update_profile(self, profile: Profile) -> TransitionResult:
        """Overwrite the persisted profile, then replace the in-memory one."""
        trigger = "update_profile"
        blocked = self._require(trigger, AppPhase.HOME)
        if blocked:
            return blocked

        error = await self._attempt(
            self.store.set(self.keys.profile_key, serialize_profile(profile))
        )
        if error:
            return self._fail(trigger, [error])

        self._stored = PersistedState(
            onboarded=True, auth_token=self._stored.auth_token, profile=profile
        )
        return self._commit(self._state.with_profile(profile), trigger)

    def _set_auth_mode(self, trigger: str, mode: AuthMode) -> TransitionResult:
        blocked = self._require(trigger, AppPhase.AUTH)
        if blocked:
            return blocked

        if self._state.auth_mode == mode:
            return TransitionResult(ok=True, state=self._state, trigger=trigger)

        return self._commit(self._state.with_phase(AppPhase.AUTH, mode), trigger)

    async def _attempt(self, operation: Awaitable[None]) -> Optional[StoreError]:
        """Await a store write/remove; return its StoreError instead of raising."""
        try:
            await operation
        except StoreError as e:
            return e
        return None

    async def _read(self, key: str) -> tuple[Optional[str], Optional[StoreError]]:
        try:
            return await self.store.get(key), None
        except StoreError as e:
            return None, e

    def _require(self, trigger: str, *allowed: AppPhase) -> Optional[TransitionResult]:
        """Return a failed result when the current phase does not allow trigger."""
        if self._state.phase in allowed:
            return None

        error = StateTransitionError(
            f"{trigger} is not allowed from {self._state.label}",
            current_state=self._state.label,
            attempted_transition=trigger,
            context={"allowed": [p.value for p in allowed]}
        )
        return self._fail(trigger, [error])

    def _fail(self, trigger: str, errors: Sequence[Exception]) -> TransitionResult:
        log_transition_failure(self.state_logger, self._state.label, trigger, list(errors))
        return TransitionResult(ok=False, state=self._state, trigger=trigger, errors=tuple(errors))

    def _commit(
        self,
        new_state: PhaseState,
        trigger: str,
        errors: Sequence[Exception] = (),
        context: Optional[dict[str, Any]] = None
    ) -> TransitionResult:
        old_state = self._state
        self._state = new_state

        if old_state.label != new_state.label:
            log_phase_transition(
                self.state_logger,
                from_phase=old_state.label,
                to_phase=new_state.label,
                trigger=trigger,
                context=context
            )
        else:
            self.logger.info("Phase state updated", phase=new_state.label, trigger=trigger)

        for listener in list(self._listeners):
            listener(new_state)

        return TransitionResult(ok=True, state=new_state, trigger=trigger, errors=tuple(errors))
