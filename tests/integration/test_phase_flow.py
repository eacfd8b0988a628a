"""End-to-end phase flows across simulated app restarts."""

import asyncio

from cozy_app.persistence.kv_store import SqliteKeyValueStore
from cozy_app.state.controller import PhaseController
from cozy_app.state.models import AppPhase, AuthMode, Profile


class TestFullLifecycle:
    """Walk the whole state machine against one store."""

    def test_onboarding_to_logout_scenario(self, controller, cold_start):
        assert asyncio.run(controller.resolve_startup_phase()).phase == AppPhase.ONBOARDING

        result = asyncio.run(controller.complete_onboarding())
        assert result.state.phase == AppPhase.AUTH
        assert result.state.auth_mode == AuthMode.SIGN_IN

        result = asyncio.run(controller.authenticate("tok1", Profile(email="a@b.com")))
        assert result.phase == AppPhase.HOME
        assert controller.profile.email == "a@b.com"

        result = asyncio.run(controller.logout())
        assert result.state.phase == AppPhase.AUTH
        assert result.state.auth_mode == AuthMode.SIGN_IN

        restarted = cold_start()
        assert restarted.phase == AppPhase.AUTH
        assert restarted.state.auth_mode == AuthMode.SIGN_IN

    def test_restart_after_each_step_resumes_correctly(self, controller, cold_start):
        asyncio.run(controller.resolve_startup_phase())
        assert cold_start().phase == AppPhase.ONBOARDING

        asyncio.run(controller.complete_onboarding())
        assert cold_start().phase == AppPhase.AUTH

        asyncio.run(controller.authenticate("tok1"))
        assert cold_start().phase == AppPhase.HOME

        asyncio.run(controller.restart())
        assert cold_start().phase == AppPhase.ONBOARDING

    def test_logout_failure_then_recovery(self, store, controller, cold_start):
        asyncio.run(controller.resolve_startup_phase())
        asyncio.run(controller.complete_onboarding())
        asyncio.run(controller.authenticate("tok1", Profile(email="a@b.com")))

        store.fail_remove.add("userToken")
        failed = asyncio.run(controller.logout())
        assert failed.ok is False
        assert controller.phase == AppPhase.HOME
        assert cold_start().phase == AppPhase.HOME

        store.heal()
        assert asyncio.run(controller.logout()).complete
        assert cold_start().phase == AppPhase.AUTH


class TestSqliteLifecycle:
    """Same flow on the durable store, with a fresh store per restart."""

    def test_progress_survives_reopen(self, tmp_path):
        db_path = str(tmp_path / "cozy.db")
        profile = Profile(email="a@b.com", signup_method="email", user_id="1")

        controller = PhaseController(SqliteKeyValueStore(db_path))
        asyncio.run(controller.resolve_startup_phase())
        asyncio.run(controller.complete_onboarding())
        asyncio.run(controller.authenticate("tok1", profile))
        asyncio.run(controller.update_profile(profile.with_changes(email="new@b.com")))

        reopened = PhaseController(SqliteKeyValueStore(db_path))
        asyncio.run(reopened.resolve_startup_phase())

        assert reopened.phase == AppPhase.HOME
        assert reopened.profile == profile.with_changes(email="new@b.com")

        asyncio.run(reopened.restart())

        third = PhaseController(SqliteKeyValueStore(db_path))
        asyncio.run(third.resolve_startup_phase())
        assert third.phase == AppPhase.ONBOARDING
