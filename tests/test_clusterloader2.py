import pytest
import yaml

from scaletest.scenarios.clusterloader2 import (
    CL2_SCENARIO_ENV,
    available_scenarios,
    generate_all_scenario_yaml,
    get_scenario_from_env,
    get_scenario_steps,
)
from scaletest.scenarios.networkload import new_network_load_config
from scaletest.scenarios.uniformqps import new_uniform_qps_config
from scaletest.templating import GENERATED_NOTICE


def test_available_scenarios():
    assert available_scenarios() == ["HighTrafficLoad", "UniformQPS"]


def test_get_scenario_steps_known():
    assert get_scenario_steps("UniformQPS") == [new_uniform_qps_config()]
    assert get_scenario_steps("HighTrafficLoad") == [new_network_load_config()]


def test_get_scenario_steps_unknown():
    with pytest.raises(LookupError, match="Scenario not found"):
        get_scenario_steps("NoSuchScenario")


def test_get_scenario_from_env(monkeypatch):
    monkeypatch.setenv(CL2_SCENARIO_ENV, "HighTrafficLoad")
    scenario = get_scenario_from_env()
    assert scenario.name == "HighTrafficLoad"
    assert scenario.get_templates() == [new_network_load_config()]


def test_get_scenario_from_env_unset(monkeypatch):
    monkeypatch.delenv(CL2_SCENARIO_ENV, raising=False)
    with pytest.raises(LookupError, match="CL2_SCENARIO not set"):
        get_scenario_from_env()


def test_get_scenario_from_env_unknown(monkeypatch):
    monkeypatch.setenv(CL2_SCENARIO_ENV, "Bogus")
    with pytest.raises(LookupError, match="Scenario not found"):
        get_scenario_from_env()


def test_generate_all_scenario_yaml(tmp_path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text("", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    paths = generate_all_scenario_yaml()
    root = tmp_path.resolve()
    assert set(paths) == {
        root / "scaletest" / "scenarios" / "uniformqps" / "config_generated.yaml",
        root / "scaletest" / "scenarios" / "networkload" / "config_generated.yaml",
    }
    for path in paths:
        text = path.read_text(encoding="utf-8")
        assert text.startswith(GENERATED_NOTICE)
        assert "{{" not in text
        assert isinstance(yaml.safe_load(text), dict)


def test_generated_network_load_matches_config(tmp_path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text("", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    paths = generate_all_scenario_yaml()
    network = next(p for p in paths if p.parent.name == "networkload")
    doc = yaml.safe_load(network.read_text(encoding="utf-8"))
    assert doc["namespace"]["number"] == new_network_load_config().fortio_namespaces