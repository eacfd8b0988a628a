"""
Cozy App - Phase-gated application shell

Drives a user through splash, onboarding, authentication and home phases,
persisting progress in a key-value store so the app resumes at the right
phase after a restart.
"""

__version__ = "0.1.0"
__author__ = "Cozy Team"
