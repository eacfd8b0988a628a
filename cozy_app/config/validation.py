"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_STORE_BACKENDS = ("sqlite", "memory")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_storage_keys(params: dict[str, Any]) -> list[ValidationError]:
        """Validate persisted key names."""
        errors = []
        seen: dict[str, str] = {}

        for field in ("onboarded_key", "token_key", "profile_key"):
            if field not in params:
                continue
            value = params[field]
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    field=f"storage.{field}",
                    message="Must be a non-empty string",
                    value=value
                ))
                continue
            if value in seen:
                errors.append(ValidationError(
                    field=f"storage.{field}",
                    message=f"Duplicates storage.{seen[value]}",
                    value=value
                ))
            seen[value] = field

        return errors

    @staticmethod
    def validate_splash_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate splash parameters."""
        errors = []

        if "duration_seconds" in params:
            value = params["duration_seconds"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="splash.duration_seconds",
                    message="Must be a non-negative number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_store_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate persistent store parameters."""
        errors = []

        if "backend" in params and params["backend"] not in VALID_STORE_BACKENDS:
            errors.append(ValidationError(
                field="store.backend",
                message=f"Must be one of {', '.join(VALID_STORE_BACKENDS)}",
                value=params["backend"]
            ))

        if "db_path" in params:
            value = params["db_path"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="store.db_path",
                    message="Must be a non-empty string",
                    value=value
                ))

        if "timeout_seconds" in params:
            value = params["timeout_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="store.timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_auth_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate credential parameters."""
        errors = []

        if "min_password_length" in params:
            value = params["min_password_length"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="auth.min_password_length",
                    message="Must be a positive integer",
                    value=value
                ))

        for field in ("sign_in_latency_seconds", "guest_latency_seconds",
                      "sign_up_latency_seconds", "social_latency_seconds"):
            if field in params:
                value = params[field]
                if not _is_number(value) or value < 0:
                    errors.append(ValidationError(
                        field=f"auth.{field}",
                        message="Must be a non-negative number",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in VALID_LOG_LEVELS:
                errors.append(ValidationError(
                    field="logging.level",
                    message=f"Must be one of {', '.join(VALID_LOG_LEVELS)}",
                    value=value
                ))

        for field in ("format_json", "include_timestamp"):
            if field in params and not isinstance(params[field], bool):
                errors.append(ValidationError(
                    field=f"logging.{field}",
                    message="Must be a boolean",
                    value=params[field]
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "storage" in config:
            errors.extend(ConfigValidator.validate_storage_keys(config["storage"]))

        if "splash" in config:
            errors.extend(ConfigValidator.validate_splash_params(config["splash"]))

        if "store" in config:
            errors.extend(ConfigValidator.validate_store_params(config["store"]))

        if "auth" in config:
            errors.extend(ConfigValidator.validate_auth_params(config["auth"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors
