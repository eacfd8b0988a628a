"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from cozy_app.config.defaults import get_default_config
from cozy_app.config.loader import ConfigLoader, load_config
from cozy_app.config.validation import ConfigValidator
from cozy_app.errors import ConfigurationError


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        config = get_default_config()

        assert config.storage.onboarded_key == "onboarded"
        assert config.storage.token_key == "userToken"
        assert config.storage.profile_key == "userData"
        assert config.splash.duration_seconds == 3.2
        assert config.auth.min_password_length == 6


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_config_loader_creation(self) -> None:
        loader = ConfigLoader.create()

        assert isinstance(loader.config_dir, Path)

    def test_missing_file_uses_defaults(self, tmp_path) -> None:
        config = ConfigLoader.create(tmp_path).merge_config()

        assert config["store"]["backend"] == "sqlite"
        assert config["splash"]["duration_seconds"] == 3.2

    def test_file_overrides_defaults(self, tmp_path) -> None:
        (tmp_path / "app.yaml").write_text("splash:\n  duration_seconds: 1.0\nstore:\n  backend: memory\n")

        config = load_config(tmp_path)

        assert config.splash.duration_seconds == 1.0
        assert config.store.backend == "memory"
        assert config.store.db_path == "cozy_state.db"

    def test_explicit_overrides_win(self, tmp_path) -> None:
        (tmp_path / "app.yaml").write_text("splash:\n  duration_seconds: 1.0\n")

        config = load_config(tmp_path, {"splash": {"duration_seconds": 0}})

        assert config.splash.duration_seconds == 0

    def test_empty_file(self, tmp_path) -> None:
        (tmp_path / "app.yaml").write_text("")

        assert load_config(tmp_path) == get_default_config()

    def test_non_mapping_file_rejected(self, tmp_path) -> None:
        (tmp_path / "app.yaml").write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError):
            load_config(tmp_path)

    def test_invalid_values_rejected(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(tmp_path, {"auth": {"min_password_length": 0}})

        assert exc_info.value.errors[0].field == "auth.min_password_length"

    def test_unknown_field_rejected(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError):
            load_config(tmp_path, {"splash": {"animation": "fade"}})

    def test_shipped_config_is_valid(self) -> None:
        config = ConfigLoader.create().load()

        assert config.storage.token_key == "userToken"


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_defaults_are_valid(self) -> None:
        config = ConfigLoader.create(Path("/nonexistent")).merge_config()

        assert ConfigValidator.validate_config(config) == []

    def test_duplicate_storage_keys(self) -> None:
        errors = ConfigValidator.validate_storage_keys({
            "onboarded_key": "k", "token_key": "k", "profile_key": "userData"
        })

        assert len(errors) == 1
        assert errors[0].field == "storage.token_key"

    def test_empty_storage_key(self) -> None:
        errors = ConfigValidator.validate_storage_keys({"profile_key": ""})

        assert errors[0].field == "storage.profile_key"

    def test_negative_splash_duration(self) -> None:
        errors = ConfigValidator.validate_splash_params({"duration_seconds": -1})

        assert errors[0].field == "splash.duration_seconds"

    def test_unknown_backend(self) -> None:
        errors = ConfigValidator.validate_store_params({"backend": "redis"})

        assert errors[0].field == "store.backend"

    def test_bool_is_not_a_length(self) -> None:
        errors = ConfigValidator.validate_auth_params({"min_password_length": True})

        assert len(errors) == 1

    def test_unknown_log_level(self) -> None:
        errors = ConfigValidator.validate_logging_params({"level": "LOUD", "format_json": "yes"})

        assert [e.field for e in errors] == ["logging.level", "logging.format_json"]
