"""
System failure error classifications.

These exceptions represent misuse of the phase controller or a broken
configuration rather than a transient collaborator failure.
"""

from typing import Any, Dict, Optional


class StateTransitionError(Exception):
    """Operation requested from a phase that does not allow it."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_transition: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.current_state = current_state
        self.attempted_transition = attempted_transition
        self.context = context or {}
        self.recoverable = False


class ConfigurationError(Exception):
    """Configuration could not be loaded or failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or []
        self.recoverable = False
