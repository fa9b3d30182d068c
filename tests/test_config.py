# tests/test_config.py
"""
Tests for configuration loading and the validation policy.
"""

import pytest

from aiaccess.config import (TrackerConfig, config_from_dict, from_preset,
                             list_presets, load_config)
from aiaccess.exceptions import (ConfigError, InvalidFrameError,
                                 InvalidIdentifierError, PatternError,
                                 ValidationError)
from aiaccess.geometry import Rect
from aiaccess.validation import ValidationPolicy, metadata_size


class TestTrackerConfig:
    """Tests for TrackerConfig and presets."""

    def test_defaults(self):
        """Defaults should match the documented limits."""
        cfg = TrackerConfig()
        assert cfg.max_tracked_elements == 10000
        assert cfg.max_identifier_length == 200
        assert cfg.max_context_size == 5000
        assert cfg.max_coordinate == 1_000_000
        assert "password" in cfg.sensitive_terms

    def test_with_overrides(self):
        """with_overrides() should return a new instance."""
        cfg = TrackerConfig()
        fast = cfg.with_overrides(wait_timeout=1.0)
        assert fast.wait_timeout == 1.0
        assert cfg.wait_timeout == 5.0

    def test_unknown_override_rejected(self):
        """Unknown fields should raise ConfigError."""
        with pytest.raises(ConfigError):
            TrackerConfig().with_overrides(nonsense=1)

    def test_presets(self):
        """Each listed preset should build a config."""
        for name in list_presets():
            assert isinstance(from_preset(name), TrackerConfig)
        assert from_preset("ci").wait_timeout == 15.0

    def test_unknown_preset(self):
        """An unknown preset should raise ConfigError."""
        with pytest.raises(ConfigError):
            from_preset("turbo")


class TestLoadConfig:
    """Tests for load_config() and config_from_dict()."""

    def test_load_yaml(self, tmp_path):
        """A YAML file should override defaults on top of a preset."""
        path = tmp_path / "aiaccess.yaml"
        path.write_text(
            "preset: fast\n"
            "max_tracked_elements: 50\n"
            "sensitive_terms: [pin]\n",
            encoding="utf-8",
        )

        cfg = load_config(str(path))

        assert cfg.max_tracked_elements == 50
        assert cfg.poll_interval == 0.05
        assert cfg.sensitive_terms == ("pin",)

    def test_empty_file_gives_defaults(self, tmp_path):
        """An empty file should load the default config."""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(str(path)) == TrackerConfig()

    def test_missing_file(self, tmp_path):
        """A missing file should raise ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            load_config(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml(self, tmp_path):
        """Malformed YAML should raise ConfigError."""
        path = tmp_path / "bad.yaml"
        path.write_text("max_tracked_elements: [1, 2\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(str(path))

    def test_non_mapping_root(self, tmp_path):
        """A list at the root should raise ConfigError."""
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(str(path))

    def test_schema_rejects_unknown_key(self):
        """Unknown keys should fail schema validation."""
        with pytest.raises(ConfigError, match="schema validation failed"):
            config_from_dict({"max_elements": 5})

    def test_schema_rejects_bad_type(self):
        """Wrong value types should fail schema validation."""
        with pytest.raises(ConfigError):
            config_from_dict({"poll_interval": 0})


class TestValidationPolicy:
    """Tests for individual validation rules."""

    @pytest.fixture
    def policy(self):
        return ValidationPolicy()

    @pytest.mark.parametrize("identifier", [
        "button_primary_save",
        "list-item.3",
        "A1",
        "x" * 200,
    ])
    def test_valid_identifiers(self, policy, identifier):
        """Letters, digits, '_', '-' and '.' up to 200 chars are accepted."""
        policy.validate_identifier(identifier)

    @pytest.mark.parametrize("identifier", ["", "x" * 201, "a b", "tab\t", "line\n", "emoji_☃"])
    def test_invalid_identifiers(self, policy, identifier):
        """Anything else should raise InvalidIdentifierError."""
        with pytest.raises(InvalidIdentifierError) as exc_info:
            policy.validate_identifier(identifier)
        assert exc_info.value.identifier == identifier

    def test_frame_at_bound_accepted(self, policy):
        """Coordinates equal to max_coordinate are allowed."""
        policy.validate_frame(Rect(-1_000_000, 1_000_000, 0, 0))

    def test_frame_over_bound_rejected(self, policy):
        """Coordinates over max_coordinate should raise."""
        with pytest.raises(InvalidFrameError):
            policy.validate_frame(Rect(0, -1_000_001, 1, 1))

    def test_metadata_size_counts_keys_and_values(self):
        """Size is the sum of key and value lengths."""
        assert metadata_size({"ab": "cde", "f": ""}) == 6

    def test_custom_sensitive_terms(self):
        """A policy built with explicit terms should only use those."""
        policy = ValidationPolicy(sensitive_terms=["pin"])
        policy.validate_context({"password_hint": "x"})
        with pytest.raises(ValidationError):
            policy.validate_context({"PIN": "1234"})

    def test_compile_pattern_case_insensitive(self):
        """Compiled patterns should ignore case."""
        assert ValidationPolicy.compile_pattern("SAVE").search("button_primary_save")

    def test_compile_pattern_error(self):
        """Bad syntax should raise PatternError with details."""
        with pytest.raises(PatternError) as exc_info:
            ValidationPolicy.compile_pattern("[")
        assert exc_info.value.pattern == "["
        assert exc_info.value.details


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
