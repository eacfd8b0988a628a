"""Unit tests for the app shell coordinator."""

import asyncio
import time
from unittest.mock import AsyncMock

import pytest

from cozy_app.auth.provider import AuthOutcome, GUEST_TOKEN, LocalCredentialProvider
from cozy_app.config.loader import load_config
from cozy_app.errors import AuthError, CredentialValidationError, StateTransitionError
from cozy_app.persistence.kv_store import InMemoryKeyValueStore
from cozy_app.shell import AppShell
from cozy_app.state.models import AppPhase, Profile


@pytest.fixture
def fast_config(tmp_path):
    return load_config(tmp_path, {"splash": {"duration_seconds": 0}})


def shell_at_auth(store, config, provider=None) -> AppShell:
    store.data["onboarded"] = "true"
    shell = AppShell(store, provider, config)
    asyncio.run(shell.start())
    assert shell.phase == AppPhase.AUTH
    return shell


class TestStartup:
    """Test splash timing and resolution."""

    def test_start_resolves_phase(self, store, fast_config):
        shell = AppShell(store, config=fast_config)

        result = asyncio.run(shell.start())

        assert result.complete
        assert shell.phase == AppPhase.ONBOARDING

    def test_start_waits_for_splash(self, store, tmp_path):
        config = load_config(tmp_path, {"splash": {"duration_seconds": 0.05}})
        shell = AppShell(store, config=config)

        started = time.monotonic()
        asyncio.run(shell.start())

        assert time.monotonic() - started >= 0.04
        assert shell.phase == AppPhase.ONBOARDING

    def test_skip_onboarding(self, store, fast_config):
        shell = AppShell(store, config=fast_config)
        asyncio.run(shell.start())

        result = asyncio.run(shell.skip_onboarding())

        assert result.complete
        assert shell.phase == AppPhase.AUTH
        assert store.data["onboarded"] == "true"


class TestLoginFlows:
    """Test validate → provider → authenticate flows."""

    def test_sign_in(self, store, fast_config):
        shell = shell_at_auth(store, fast_config)

        result = asyncio.run(shell.sign_in(" a@b.com ", "pw"))

        assert result.complete
        assert shell.phase == AppPhase.HOME
        assert store.data["userToken"].startswith("token_a@b.com_")

    def test_guest(self, store, fast_config):
        shell = shell_at_auth(store, fast_config)

        result = asyncio.run(shell.continue_as_guest())

        assert result.complete
        assert shell.state.profile is None
        assert store.data["userToken"] == GUEST_TOKEN

    def test_sign_up_persists_profile(self, store, fast_config):
        shell = shell_at_auth(store, fast_config)
        shell.navigate_to_signup()

        result = asyncio.run(shell.sign_up("a@b.com", "secret", "secret"))

        assert result.complete
        assert shell.state.profile.email == "a@b.com"
        assert "userData" in store.data

    def test_social_sign_up(self, store, fast_config):
        shell = shell_at_auth(store, fast_config)

        asyncio.run(shell.social_sign_up("apple"))

        assert shell.state.profile.signup_method == "apple"

    def test_validation_failure_never_reaches_provider(self, store, fast_config):
        provider = AsyncMock(spec=LocalCredentialProvider)
        shell = shell_at_auth(store, fast_config, provider)
        calls_before = len(store.calls)

        result = asyncio.run(shell.sign_up("a@b.com", "abc", "abc"))

        assert result.ok is False
        assert isinstance(result.error, CredentialValidationError)
        provider.authenticate.assert_not_called()
        assert len(store.calls) == calls_before
        assert shell.phase == AppPhase.AUTH

    def test_provider_rejection_surfaced(self, store, fast_config):
        provider = LocalCredentialProvider(rejected_emails=["a@b.com"])
        shell = shell_at_auth(store, fast_config, provider)

        result = asyncio.run(shell.sign_in("a@b.com", "pw"))

        assert result.ok is False
        assert isinstance(result.error, AuthError)
        assert "userToken" not in store.data

    def test_provider_called_once_without_retry(self, store, fast_config):
        provider = AsyncMock(spec=LocalCredentialProvider)
        provider.authenticate.side_effect = AuthError("unavailable", reason="unavailable")
        shell = shell_at_auth(store, fast_config, provider)

        asyncio.run(shell.continue_as_guest())

        assert provider.authenticate.await_count == 1

    def test_provider_outcome_passed_to_controller(self, store, fast_config):
        provider = AsyncMock(spec=LocalCredentialProvider)
        provider.authenticate.return_value = AuthOutcome("tok9", Profile(email="z@b.com"))
        shell = shell_at_auth(store, fast_config, provider)

        asyncio.run(shell.sign_in("z@b.com", "pw"))

        assert store.data["userToken"] == "tok9"
        assert shell.state.profile == Profile(email="z@b.com")

    def test_login_outside_auth_skips_provider(self, store, fast_config):
        provider = AsyncMock(spec=LocalCredentialProvider)
        shell = AppShell(store, provider, fast_config)
        asyncio.run(shell.start())

        result = asyncio.run(shell.continue_as_guest())

        assert isinstance(result.error, StateTransitionError)
        provider.authenticate.assert_not_called()


class TestHomeOperations:
    """Test pass-through operations from HOME."""

    def test_update_logout_restart(self, store, fast_config):
        shell = shell_at_auth(store, fast_config)
        asyncio.run(shell.continue_as_guest())

        assert asyncio.run(shell.update_profile(Profile(email="g@b.com"))).complete
        assert asyncio.run(shell.logout()).complete
        assert shell.phase == AppPhase.AUTH

        asyncio.run(shell.back_to_onboarding())
        assert shell.phase == AppPhase.ONBOARDING


class TestFromConfig:
    """Test building a shell from configuration."""

    def test_memory_backend(self, tmp_path):
        shell = AppShell.from_config(
            tmp_path,
            {"store": {"backend": "memory"}, "splash": {"duration_seconds": 0}},
            configure_logs=False
        )

        assert isinstance(shell.store, InMemoryKeyValueStore)
        assert isinstance(shell.provider, LocalCredentialProvider)

    def test_sqlite_backend(self, tmp_path):
        shell = AppShell.from_config(
            tmp_path,
            {"store": {"db_path": str(tmp_path / "c.db")}, "splash": {"duration_seconds": 0},
             "auth": {"guest_latency_seconds": 0}},
            configure_logs=False
        )
        asyncio.run(shell.start())
        asyncio.run(shell.complete_onboarding())
        asyncio.run(shell.continue_as_guest())

        assert shell.phase == AppPhase.HOME
