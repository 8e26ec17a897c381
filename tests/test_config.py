# AKCM Config Tests
# Tests for configuration loading and validation

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from akcm.config.defaults import DEFAULT_CONFIG, generate_default_config
from akcm.config.loader import (
    apply_overrides,
    ensure_config_exists,
    get_config_path,
    load_config,
    save_config,
    validate_config_file,
)
from akcm.config.schema import AkcmConfig, Category, DesiredState, LogLevel, Policy


class TestAkcmConfig:
    """Tests for AkcmConfig schema."""

    def test_defaults(self):
        """Every section has a usable default."""
        config = AkcmConfig()
        assert config.policy.mode == DesiredState.DISABLE
        assert config.policy.content_types is None
        assert config.host.cdp_endpoint == "http://localhost:9222"
        assert config.direct_call.endpoint is None
        assert config.output.log_level == LogLevel.NORMAL

    def test_defaults_dict_matches_schema(self):
        """DEFAULT_CONFIG validates to the same values as the schema defaults."""
        assert AkcmConfig.model_validate(DEFAULT_CONFIG) == AkcmConfig()

    def test_invalid_mode(self):
        with pytest.raises(ValidationError):
            Policy(mode="toggle")


class TestPolicy:
    """Tests for Policy normalization."""

    def test_content_types_case_insensitive(self):
        policy = Policy(content_types=["app", " Video "])
        assert policy.content_types == [Category.APP, Category.VIDEO]

    def test_single_content_type(self):
        assert Policy(content_types="ebook").content_types == [Category.EBOOK]

    def test_single_keyword(self):
        assert Policy(keywords="dino").keywords == ["dino"]

    def test_desired_state(self):
        assert Policy(mode="enable").desired_state is True
        assert Policy(mode="disable").desired_state is False

    def test_past_tense(self):
        assert DesiredState.DISABLE.past_tense == "disabled"


class TestCategory:
    """Tests for Category parsing."""

    @pytest.mark.parametrize(
        "raw,expected",
        [("APP", Category.APP), ("Ebook", Category.EBOOK), ("podcast", Category.UNKNOWN), (None, Category.UNKNOWN)],
    )
    def test_parse(self, raw, expected):
        assert Category.parse(raw) == expected


class TestConfigLoader:
    """Tests for config loading and saving."""

    def test_load_missing_config_gives_defaults(self, temp_dir: Path):
        """A missing file is not an error."""
        config = load_config(temp_dir / "nonexistent.yaml")
        assert config == AkcmConfig()

    def test_load_partial_config(self, temp_dir: Path):
        """Missing keys are filled from defaults."""
        path = temp_dir / "config.yaml"
        path.write_text("policy:\n  mode: enable\n  keywords: [lego]\n", encoding="utf-8")

        config = load_config(path)

        assert config.policy.mode == DesiredState.ENABLE
        assert config.policy.keywords == ["lego"]
        assert config.policy.concurrency == 5
        assert config.timing.verify_timeout_ms == 3000

    def test_load_empty_file(self, temp_dir: Path):
        path = temp_dir / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == AkcmConfig()

    def test_load_invalid_value(self, temp_dir: Path):
        path = temp_dir / "config.yaml"
        path.write_text("policy:\n  concurrency: lots\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_save_config(self, temp_dir: Path):
        """Saved configuration loads back with enum values as strings."""
        config = AkcmConfig(policy=Policy(mode="enable", content_types=["APP"]))
        config_path = temp_dir / "nested" / "config.yaml"

        save_config(config, config_path)

        with open(config_path, encoding="utf-8") as f:
            saved = yaml.safe_load(f)
        assert saved["policy"]["mode"] == "enable"
        assert saved["policy"]["content_types"] == ["APP"]
        assert load_config(config_path) == config

    def test_env_override(self, temp_home: Path, monkeypatch: pytest.MonkeyPatch):
        custom = temp_home / "custom.yaml"
        monkeypatch.setenv("AKCM_CONFIG", str(custom))
        assert get_config_path() == custom

    def test_default_path(self, temp_home: Path):
        assert get_config_path() == temp_home / ".config" / "akcm" / "config.yaml"

    def test_ensure_config_exists(self, temp_dir: Path):
        path = temp_dir / "config.yaml"

        created_path, created = ensure_config_exists(path)
        assert created is True
        assert created_path.read_text(encoding="utf-8").startswith("# AKCM Configuration")

        _, created_again = ensure_config_exists(path)
        assert created_again is False


class TestValidateConfigFile:
    """Tests for validate_config_file."""

    def test_valid(self, temp_dir: Path):
        path = temp_dir / "config.yaml"
        path.write_text(generate_default_config(), encoding="utf-8")

        is_valid, errors = validate_config_file(path)

        assert is_valid is True
        assert errors == []

    def test_missing(self, temp_dir: Path):
        is_valid, errors = validate_config_file(temp_dir / "missing.yaml")
        assert is_valid is False
        assert "not found" in errors[0]

    def test_invalid_yaml(self, temp_dir: Path):
        bad_file = temp_dir / "bad.yaml"
        bad_file.write_text("{ invalid yaml [", encoding="utf-8")

        is_valid, errors = validate_config_file(bad_file)

        assert is_valid is False
        assert errors[0].startswith("Invalid YAML syntax")

    def test_empty(self, temp_dir: Path):
        path = temp_dir / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert validate_config_file(path) == (False, ["Configuration file is empty"])

    def test_not_a_mapping(self, temp_dir: Path):
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        is_valid, _ = validate_config_file(path)
        assert is_valid is False

    def test_schema_errors_have_locations(self, temp_dir: Path):
        path = temp_dir / "config.yaml"
        path.write_text("policy:\n  mode: sideways\n", encoding="utf-8")

        is_valid, errors = validate_config_file(path)

        assert is_valid is False
        assert errors[0].startswith("policy -> mode")


class TestApplyOverrides:
    """Tests for CLI overrides."""

    def test_overrides_applied(self):
        config = apply_overrides(
            AkcmConfig(),
            policy__mode="enable",
            policy__content_types=["app"],
            host__child_name="Ava",
        )
        assert config.policy.mode == DesiredState.ENABLE
        assert config.policy.content_types == [Category.APP]
        assert config.host.child_name == "Ava"

    def test_none_values_ignored(self):
        base = AkcmConfig(policy=Policy(concurrency=9))
        assert apply_overrides(base, policy__concurrency=None).policy.concurrency == 9

    def test_base_config_untouched(self):
        base = AkcmConfig()
        apply_overrides(base, policy__dry_run=True)
        assert base.policy.dry_run is False

    def test_unknown_section(self):
        with pytest.raises(KeyError):
            apply_overrides(AkcmConfig(), bogus__value=1)

    def test_invalid_value(self):
        with pytest.raises(ValidationError):
            apply_overrides(AkcmConfig(), policy__max_retries="many")


class TestDefaults:
    """Tests for default configuration."""

    def test_default_config_structure(self):
        for section in ("policy", "timing", "host", "direct_call", "output"):
            assert section in DEFAULT_CONFIG

    def test_generated_yaml_parses(self):
        data = yaml.safe_load(generate_default_config())
        assert data == DEFAULT_CONFIG
