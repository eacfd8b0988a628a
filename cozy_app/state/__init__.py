"""
Phase state module.

Derives the application phase from persisted flags and applies validated,
persisted transitions: SPLASH → ONBOARDING → AUTH(SIGN_IN/SIGN_UP) → HOME.
"""
