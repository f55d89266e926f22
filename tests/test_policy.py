import json
from decimal import Decimal

import pytest

from clearview_pricing.config.settings import Settings
from clearview_pricing.engine import CatalogError
from clearview_pricing.engine.policy import build_pricing_config, load_pricing_config


def test_load_policy_file(tmp_path):
    path = tmp_path / "policy.json"
    path.write_text(json.dumps({
        "tax_rate": "0.12",
        "buffer_rate": 0.05,
        "minimum_charge": {"gutter": 150, "1": "150"},
    }), encoding="utf-8")

    config = load_pricing_config(path)

    assert config.tax_rate == Decimal("0.12")
    assert config.buffer_rate == Decimal("0.05")
    assert config.minimum_charge == {"gutter": Decimal("150"), "1": Decimal("150")}


def test_missing_policy_uses_defaults(tmp_path):
    config = load_pricing_config(tmp_path / "missing.json")

    assert config.tax_rate == Decimal("0.05")
    assert config.buffer_rate == Decimal("0")
    assert config.minimum_charge == Decimal("0")


def test_overrides_win_over_file(tmp_path):
    path = tmp_path / "policy.json"
    path.write_text(json.dumps({"tax_rate": "0.05"}), encoding="utf-8")

    config = load_pricing_config(path, tax_rate_override=Decimal("0.12"), buffer_rate_override=Decimal("0.05"))

    assert config.tax_rate == Decimal("0.12")
    assert config.buffer_rate == Decimal("0.05")


def test_flat_minimum_charge():
    config = build_pricing_config(minimum_charge="75")
    assert config.minimum_charge == Decimal("75")


@pytest.mark.parametrize("kwargs", [
    {"tax_rate": "-0.01"},
    {"tax_rate": "1.5"},
    {"tax_rate": "abc"},
    {"tax_rate": "NaN"},
    {"buffer_rate": "1"},
    {"buffer_rate": "-0.05"},
    {"minimum_charge": "-10"},
    {"minimum_charge": {"gutter": "-150"}},
])
def test_invalid_policy_values(kwargs):
    with pytest.raises(CatalogError):
        build_pricing_config(**kwargs)


def test_settings_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("CLEARVIEW_CATALOG", str(tmp_path / "services.csv"))
    monkeypatch.setenv("CLEARVIEW_TAX_RATE", "0.12")
    monkeypatch.setenv("CLEARVIEW_LOG_LEVEL", "debug")
    monkeypatch.delenv("CLEARVIEW_POLICY", raising=False)
    monkeypatch.delenv("CLEARVIEW_BUFFER_RATE", raising=False)

    settings = Settings.load(project_root=tmp_path)

    assert settings.catalog_csv == tmp_path / "services.csv"
    assert settings.policy_json.name == "pricing_policy.json"
    assert settings.tax_rate_override == Decimal("0.12")
    assert settings.buffer_rate_override is None
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("name, value", [
    ("CLEARVIEW_TAX_RATE", "five percent"),
    ("CLEARVIEW_BUFFER_RATE", "abc"),
    ("CLEARVIEW_TAX_RATE", "Infinity"),
])
def test_settings_rejects_non_numeric_env(monkeypatch, tmp_path, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(CatalogError, match=name):
        Settings.load(project_root=tmp_path)


@pytest.mark.parametrize("value", ["0", "-1", "NaN", "lots"])
def test_settings_rejects_unusable_default_units(monkeypatch, tmp_path, value):
    monkeypatch.setenv("CLEARVIEW_DEFAULT_UNITS", value)

    with pytest.raises(CatalogError, match="CLEARVIEW_DEFAULT_UNITS"):
        Settings.load(project_root=tmp_path)


def test_settings_default_units(monkeypatch, tmp_path):
    monkeypatch.delenv("CLEARVIEW_DEFAULT_UNITS", raising=False)
    assert Settings.load(project_root=tmp_path).default_units == Decimal("1")

    monkeypatch.setenv("CLEARVIEW_DEFAULT_UNITS", "2.5")
    assert Settings.load(project_root=tmp_path).default_units == Decimal("2.5")
