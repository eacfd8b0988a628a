"""
Persistence error classifications for the key-value store.

These exceptions describe failures talking to the persistent store and
problems decoding what it returned.
"""

from typing import Any, Dict, Optional, Sequence


class StoreError(Exception):
    """Read, write or remove failure against the persistent store."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None,
                 failed_keys: Optional[Sequence[str]] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.operation = operation
        self.target = target
        self.failed_keys = list(failed_keys or [])
        self.context = context or {}
        self.recoverable = True


class ParseError(Exception):
    """Persisted data exists but is not in the expected format."""

    def __init__(self, message: str, raw_data: Optional[str] = None,
                 expected_format: Optional[str] = None):
        super().__init__(message)
        self.raw_data = raw_data
        self.expected_format = expected_format
        self.recoverable = True
