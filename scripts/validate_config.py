#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import Any, Optional

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from cozy_app.config.loader import ConfigLoader
from cozy_app.config.validation import ConfigValidator, ValidationError


def validate(loader: ConfigLoader, overrides: Optional[dict[str, Any]] = None) -> list[ValidationError]:
    """Validate the merged defaults, file config and overrides."""
    config = loader.merge_config(overrides)
    return ConfigValidator.validate_config(config)


def report(label: str, errors: list[ValidationError]) -> bool:
    if errors:
        print(f"❌ {label}: {len(errors)} validation errors")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value!r})")
        return False
    print(f"✅ {label} is valid")
    return True


def main():
    """Main validation function."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)

    print(f"🔍 Validating configuration in {loader.config_dir}...")

    all_valid = report("app.yaml", validate(loader))

    # Overrides commonly used by tests and demos
    all_valid &= report("in-memory override", validate(loader, {
        "store": {"backend": "memory"},
        "splash": {"duration_seconds": 0},
    }))

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
