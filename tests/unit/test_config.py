"""Unit tests for config.py"""

import pytest
import yaml

from diffreport.config import Settings, default_config_yaml, load_config


@pytest.fixture(autouse=True)
def chdir_tmp(tmp_path, monkeypatch):
    """Run each test from a clean tmp directory so no stray diffreport.yaml is read."""
    monkeypatch.chdir(tmp_path)


def test_load_config_defaults():
    """Settings defaults are used when no diffreport.yaml, env var, or CLI override exists."""
    settings = load_config()
    assert settings.top == 100
    assert settings.skip == 0
    assert settings.include_content is False
    assert settings.context_size == 5
    assert settings.fallback_line_cap == 50


def test_load_config_reads_yaml(tmp_path):
    """Values in diffreport.yaml override the model defaults."""
    (tmp_path / "diffreport.yaml").write_text("top: 20\ncontext_size: 2\n")
    settings = load_config()
    assert settings.top == 20
    assert settings.context_size == 2


def test_load_config_env_overrides_yaml(tmp_path, monkeypatch):
    """DIFFREPORT_TOP takes precedence over diffreport.yaml."""
    (tmp_path / "diffreport.yaml").write_text("top: 20\n")
    monkeypatch.setenv("DIFFREPORT_TOP", "7")
    assert load_config().top == 7


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the DIFFREPORT_CONTEXT_SIZE env var."""
    monkeypatch.setenv("DIFFREPORT_CONTEXT_SIZE", "3")
    settings = load_config(overrides={"context_size": 1})
    assert settings.context_size == 1


def test_load_config_ignores_none_overrides(monkeypatch):
    """None-valued overrides (unset CLI options) leave lower layers intact."""
    monkeypatch.setenv("DIFFREPORT_SKIP", "4")
    settings = load_config(overrides={"skip": None, "top": None})
    assert settings.skip == 4
    assert settings.top == 100


def test_load_config_env_bool(monkeypatch):
    """DIFFREPORT_INCLUDE_CONTENT is coerced to bool."""
    monkeypatch.setenv("DIFFREPORT_INCLUDE_CONTENT", "true")
    assert load_config().include_content is True


def test_load_config_invalid_yaml(tmp_path):
    """load_config raises ValueError when diffreport.yaml contains invalid YAML."""
    (tmp_path / "diffreport.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid diffreport.yaml"):
        load_config()


def test_load_config_non_mapping_yaml(tmp_path):
    """A YAML document that is not a mapping is rejected."""
    (tmp_path / "diffreport.yaml").write_text("- a\n- b\n")
    with pytest.raises(ValueError, match="expected a mapping"):
        load_config()


@pytest.mark.parametrize("field,value", [
    ("top", -1),
    ("context_size", -2),
    ("max_workers", 0),
    ("log_level", "LOUD"),
])
def test_load_config_rejects_out_of_range(field, value):
    """Field constraints surface as ValueError (pydantic ValidationError)."""
    with pytest.raises(ValueError):
        load_config(overrides={field: value})


def test_default_config_yaml_round_trips():
    """The init template parses back to the default Settings."""
    assert Settings(**yaml.safe_load(default_config_yaml())) == Settings()
