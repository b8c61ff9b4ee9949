"""Property-based tests for the configuration service."""

import json
import tempfile
from pathlib import Path

import pytest
from hypothesis import given, strategies as st

from gcdisc.models import DVD_IMAGE_SIZE, ReaderConfig
from gcdisc.services import ConfigurationError, ConfigurationService, ErrorCategory

valid_sizes = st.integers(min_value=1, max_value=2**40)
valid_name_limits = st.one_of(st.none(), st.integers(min_value=1, max_value=1 << 20))
valid_banner_names = st.text(
    min_size=1,
    max_size=32,
    alphabet=st.characters(blacklist_categories=("Cs", "Cc")),
)
valid_log_levels = st.sampled_from(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])

valid_config_strategy = st.builds(
    ReaderConfig,
    expected_image_size=valid_sizes,
    max_filename_length=valid_name_limits,
    banner_name=valid_banner_names,
    log_level=valid_log_levels,
)


@given(valid_config_strategy)
def test_configuration_round_trip(config: ReaderConfig) -> None:
    """Saving a valid configuration and loading it back preserves every value."""
    with tempfile.TemporaryDirectory() as temp_dir:
        service = ConfigurationService(Path(temp_dir) / "config.json")

        service.save_config(config)
        loaded = service.load_config()

        assert loaded == config


def test_configuration_round_trip_example(tmp_path: Path) -> None:
    config = ReaderConfig(
        expected_image_size=DVD_IMAGE_SIZE,
        max_filename_length=None,
        banner_name="opening_e.bnr",
        log_level="DEBUG",
    )
    service = ConfigurationService(tmp_path / "nested" / "config.json")

    service.save_config(config)

    saved = json.loads((tmp_path / "nested" / "config.json").read_text(encoding="utf-8"))
    assert saved["max_filename_length"] is None
    assert service.load_config() == config


def create_invalid_config_strategy():
    """Configs that construct fine but fail validation."""
    return st.one_of(
        st.builds(ReaderConfig, expected_image_size=st.integers(max_value=0)),
        st.builds(ReaderConfig, max_filename_length=st.integers(max_value=0)),
        st.builds(ReaderConfig, banner_name=st.just("")),
        st.builds(
            ReaderConfig,
            banner_name=st.text(max_size=8).map(lambda s: s + "\x00"),
        ),
        st.builds(
            ReaderConfig,
            log_level=st.text(min_size=1).filter(
                lambda x: x not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
            ),
        ),
    )


@given(create_invalid_config_strategy())
def test_configuration_validation_rejects_invalid(config: ReaderConfig) -> None:
    service = ConfigurationService()
    result = service.validate_config(config)

    assert not result.is_valid
    assert len(result.errors) > 0
    assert all(isinstance(error, str) for error in result.errors)


@given(valid_config_strategy)
def test_configuration_validation_accepts_valid(config: ReaderConfig) -> None:
    service = ConfigurationService()
    result = service.validate_config(config)

    assert result.is_valid
    assert result.errors == []


def test_configuration_validation_examples() -> None:
    service = ConfigurationService()

    assert service.validate_config(ReaderConfig()).is_valid

    result = service.validate_config(ReaderConfig(banner_name=""))
    assert not result.is_valid
    assert "banner_name cannot be empty" in result.errors

    result = service.validate_config(ReaderConfig(expected_image_size=True))  # type: ignore[arg-type]
    assert "expected_image_size must be a positive integer" in result.errors


def test_save_rejects_invalid_config(tmp_path: Path) -> None:
    service = ConfigurationService(tmp_path / "config.json")
    with pytest.raises(ConfigurationError, match="Invalid configuration") as exc_info:
        service.save_config(ReaderConfig(log_level="LOUD"))
    assert exc_info.value.category is ErrorCategory.CONFIGURATION
    assert exc_info.value.current_value["log_level"] == "LOUD"
    assert not (tmp_path / "config.json").exists()


class TestApplySetting:
    @pytest.mark.parametrize(
        "setting, field, expected",
        [
            ("expected_image_size=262144", "expected_image_size", 262144),
            ("expected_image_size=0x57058000", "expected_image_size", DVD_IMAGE_SIZE),
            ("max_filename_length=64", "max_filename_length", 64),
            ("max_filename_length=none", "max_filename_length", None),
            ("max_filename_length=", "max_filename_length", None),
            ("banner_name=opening_e.bnr", "banner_name", "opening_e.bnr"),
            ("log_level=debug", "log_level", "DEBUG"),
            (" log_level = error ", "log_level", "ERROR"),
        ],
    )
    def test_converts_value(self, setting: str, field: str, expected: object) -> None:
        config = ConfigurationService().apply_setting(ReaderConfig(), setting)
        assert getattr(config, field) == expected

    def test_leaves_other_fields(self) -> None:
        original = ReaderConfig(banner_name="opening_j.bnr")
        config = ConfigurationService().apply_setting(original, "log_level=ERROR")
        assert config.banner_name == "opening_j.bnr"
        assert original.log_level == "INFO"

    @pytest.mark.parametrize("setting", ["log_level", "=DEBUG", ""])
    def test_malformed(self, setting: str) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigurationService().apply_setting(ReaderConfig(), setting)
        assert exc_info.value.expected == "KEY=VALUE"

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown setting: colour") as exc_info:
            ConfigurationService().apply_setting(ReaderConfig(), "colour=blue")
        assert exc_info.value.setting == "colour"
        assert "banner_name" in exc_info.value.expected

    @given(st.text(alphabet="xyz!?", min_size=1, max_size=8))
    def test_non_integer_size(self, value: str) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigurationService().apply_setting(ReaderConfig(), f"expected_image_size={value}")
        assert exc_info.value.setting == "expected_image_size"
        assert exc_info.value.current_value == value.strip()

    def test_invalid_values_fail_on_save(self, tmp_path: Path) -> None:
        service = ConfigurationService(tmp_path / "config.json")
        config = service.apply_setting(ReaderConfig(), "expected_image_size=-1")
        with pytest.raises(ConfigurationError, match="expected_image_size must be a positive integer"):
            service.save_config(config)


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        service = ConfigurationService(tmp_path / "absent.json")
        assert service.load_config() == ReaderConfig()

    def test_malformed_json_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        assert ConfigurationService(path).load_config() == ReaderConfig()

    def test_non_object_json_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert ConfigurationService(path).load_config() == ReaderConfig()

    def test_invalid_values_give_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"expected_image_size": -5}), encoding="utf-8")
        assert ConfigurationService(path).load_config() == ReaderConfig()

    def test_missing_keys_fall_back_individually(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"banner_name": "opening_j.bnr"}), encoding="utf-8")
        config = ConfigurationService(path).load_config()
        assert config.banner_name == "opening_j.bnr"
        assert config.expected_image_size == DVD_IMAGE_SIZE
        assert config.max_filename_length == 1024

    def test_explicit_null_disables_name_limit(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"max_filename_length": None}), encoding="utf-8")
        assert ConfigurationService(path).load_config().max_filename_length is None

    def test_log_level_is_case_insensitive(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"log_level": "debug"}), encoding="utf-8")
        assert ConfigurationService(path).load_config().log_level == "DEBUG"


def test_default_config_path() -> None:
    service = ConfigurationService()
    assert service.config_path == Path.home() / ".config" / "gc-disc-inspector" / "config.json"
