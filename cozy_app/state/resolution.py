"""
Phase derivation from persisted flags.

Pure functions: decoding the raw values read from the store and mapping
them onto the phase the application must present. Nothing here touches
the store or mutates state.
"""

import json
from typing import Any, Optional

from ..errors import ParseError
from .models import AppPhase, PersistedState, Profile

ONBOARDED_VALUE = "true"

# JSON key -> Profile attribute
PROFILE_FIELDS = {
    "email": "email",
    "signupMethod": "signup_method",
    "joinDate": "join_date",
    "id": "user_id",
}


def parse_profile(raw: Optional[str]) -> Optional[Profile]:
    """
    Decode a persisted profile document.

    Unknown keys are dropped. Known keys must be strings or null.

    Args:
        raw: JSON text as stored, or None when the key is absent

    Returns:
        Profile, or None when nothing is stored

    Raises:
        ParseError: If the document is not a well-formed profile
    """
    if raw is None:
        return None

    try:
        data = json.loads(raw)
    # RecursionError: pathologically nested documents
    except (TypeError, ValueError, RecursionError) as e:
        raise ParseError(
            f"Profile is not valid JSON: {e}",
            raw_data=raw,
            expected_format="json_object"
        ) from e

    if not isinstance(data, dict):
        raise ParseError(
            f"Profile must be a JSON object, got {type(data).__name__}",
            raw_data=raw,
            expected_format="json_object"
        )

    values: dict[str, Any] = {}
    for json_key, attr in PROFILE_FIELDS.items():
        value = data.get(json_key)
        # Older records stored numeric ids
        if json_key == "id" and isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if value is not None and not isinstance(value, str):
            raise ParseError(
                f"Profile field '{json_key}' must be a string",
                raw_data=raw,
                expected_format="string"
            )
        values[attr] = value

    return Profile(**values)


def serialize_profile(profile: Profile) -> str:
    """Encode the full profile record for storage."""
    data = {
        json_key: getattr(profile, attr)
        for json_key, attr in PROFILE_FIELDS.items()
        if getattr(profile, attr) is not None
    }
    return json.dumps(data, sort_keys=True)


def decode_persisted_state(onboarded: Optional[str], token: Optional[str],
                           profile: Optional[str]) -> PersistedState:
    """
    Build PersistedState from raw store values.

    Raises:
        ParseError: If the profile document is malformed
    """
    return PersistedState(
        onboarded=onboarded == ONBOARDED_VALUE,
        auth_token=token or None,
        profile=parse_profile(profile),
    )


def resolve_phase(persisted: PersistedState) -> AppPhase:
    """
    Map persisted flags onto the phase to present.

    Not onboarded always wins, even with a token present: the least
    privileged phase is chosen whenever the flags disagree.
    """
    if not persisted.onboarded:
        return AppPhase.ONBOARDING
    if not persisted.authenticated:
        return AppPhase.AUTH
    return AppPhase.HOME
