#!/usr/bin/env python3
"""
Basic Usage Example - Cozy App Phase Flow

This script walks the app shell through its phases against a throwaway
SQLite database. It shows how to:
- Build a shell from configuration
- Complete onboarding and sign up
- Observe phase changes through a listener
- Restart the app and resume from persisted state

Run: python examples/basic_usage.py
"""

import asyncio
import tempfile
from pathlib import Path

from cozy_app.shell import AppShell
from cozy_app.state.models import PhaseState, TransitionResult


def print_result(step: str, result: TransitionResult) -> None:
    """Print the outcome of one transition."""
    marker = "✅" if result.complete else ("⚠️" if result.ok else "❌")
    print(f"{marker} {step}: {result.state.label}")
    for error in result.errors:
        print(f"     {type(error).__name__}: {error}")


def print_phase_change(state: PhaseState) -> None:
    print(f"   📍 now in {state.label}")


def build_shell(db_path: Path) -> AppShell:
    return AppShell.from_config(
        overrides={
            "store": {"backend": "sqlite", "db_path": str(db_path)},
            "splash": {"duration_seconds": 0.5},
            "auth": {"sign_up_latency_seconds": 0.2},
        },
        configure_logs=False
    )


async def first_run(db_path: Path) -> None:
    print("1. First launch")
    shell = build_shell(db_path)
    shell.controller.add_listener(print_phase_change)

    print_result("start", await shell.start())
    print_result("complete_onboarding", await shell.complete_onboarding())
    print_result("navigate_to_signup", shell.navigate_to_signup())
    print_result("sign_up (mismatch)", await shell.sign_up("me@example.com", "secret", "secrets"))
    print_result("sign_up", await shell.sign_up("me@example.com", "secret", "secret"))

    profile = shell.state.profile
    print(f"   👤 {profile.email} joined {profile.join_date} via {profile.signup_method}")
    print()


async def second_run(db_path: Path) -> None:
    print("2. Relaunch resumes at home")
    shell = build_shell(db_path)

    print_result("start", await shell.start())
    print_result("logout", await shell.logout())
    print()

    print("3. Relaunch after logout")
    shell = build_shell(db_path)
    print_result("start", await shell.start())
    print_result("continue_as_guest", await shell.continue_as_guest())
    print_result("restart", await shell.restart())
    print()


def main():
    """Main demonstration function."""
    print("🚀 Cozy App - Basic Usage Demo")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmp:
        db_path = Path(tmp) / "cozy_demo.db"
        asyncio.run(first_run(db_path))
        asyncio.run(second_run(db_path))

    print("✅ Demo completed successfully!")


if __name__ == "__main__":
    main()
