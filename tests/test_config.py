import yaml
from pathlib import Path
import pytest
from pydantic import ValidationError

from upload_guard.admission import AdmissionConfig
from upload_guard.utils.config_loader import load_config


def test_load_config_base(tmp_path):
    # Create dummy settings
    settings_file = tmp_path / "settings.yaml"
    settings_data = {"admission": {"blur_threshold": 800}, "paths": {"allowed_roots": []}}
    with open(settings_file, "w") as f:
        yaml.dump(settings_data, f)

    config = load_config(str(settings_file), str(tmp_path / "local.yaml"))
    assert config["admission"]["blur_threshold"] == 800
    assert config["paths"]["allowed_roots"] == []


def test_load_config_with_overrides(tmp_path):
    settings_file = tmp_path / "settings.yaml"
    settings_data = {"admission": {"blur_threshold": 1000, "max_width": 2000}}
    with open(settings_file, "w") as f:
        yaml.dump(settings_data, f)

    local_file = tmp_path / "local.yaml"
    with open(local_file, "w") as f:
        yaml.dump({"admission": {"blur_threshold": 500}, "paths": {"allowed_roots": ["/srv/uploads"]}}, f)

    config = load_config(str(settings_file), str(local_file))
    assert config["admission"]["blur_threshold"] == 500
    assert config["admission"]["max_width"] == 2000
    assert config["paths"]["allowed_roots"] == ["/srv/uploads"]


def test_missing_settings_gives_defaults(tmp_path):
    config = load_config(str(tmp_path / "nope.yaml"), str(tmp_path / "nope_local.yaml"))
    assert config == {}
    admission = AdmissionConfig.from_settings(config)
    assert admission.blur_threshold == 1000
    assert (admission.min_width, admission.min_height) == (0, 0)
    assert (admission.max_width, admission.max_height) == (2000, 2000)
    assert admission.allowed_types == ["image/jpeg", "image/png", "image/webp", "image/gif"]
    assert admission.enable_blur_detection
    assert admission.fail_open_on_scoring_error


def test_admission_section_is_validated():
    with pytest.raises(ValidationError):
        AdmissionConfig.from_settings({"admission": {"blur_threshold": -1}})
    with pytest.raises(ValidationError):
        AdmissionConfig.from_settings({"admission": {"min_width": 3000, "max_width": 2000}})


def test_shipped_settings_match_defaults():
    settings = Path(__file__).resolve().parents[1] / "config" / "settings.yaml"
    config = load_config(str(settings), None)
    assert AdmissionConfig.from_settings(config) == AdmissionConfig()


def test_overrides_are_validated_too():
    config = {"admission": {"max_workers": 2}}
    assert AdmissionConfig.from_settings(config, enable_blur_detection=False).enable_blur_detection is False
    with pytest.raises(ValidationError):
        AdmissionConfig.from_settings(config, max_workers=-3)
