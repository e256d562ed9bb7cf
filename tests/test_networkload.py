import yaml

from scaletest.scenarios.networkload import (
    CONFIG_TEMPLATE,
    NetworkLoadConfig,
    new_network_load_config,
)
from scaletest.templating import render_template


def _render(cfg):
    return yaml.safe_load(render_template(cfg.get_template(), cfg))


def test_defaults_from_source():
    cfg = new_network_load_config()
    assert cfg.group_name == "fortio"
    assert cfg.operation_timeout == "5m"
    assert cfg.fortio_client_queries_per_second == 100


def test_get_template_returns_module_template():
    assert new_network_load_config().get_template() == CONFIG_TEMPLATE


def test_rendered_yaml_carries_config_values():
    cfg = new_network_load_config()
    doc = _render(cfg)
    assert doc["name"] == "load-config"
    assert doc["namespace"]["number"] == cfg.fortio_namespaces
    qps = [ts["qpsLoad"]["qps"] for ts in doc["tuningSets"] if "qpsLoad" in ts]
    assert qps == [cfg.api_server_calls_per_second, cfg.api_server_calls_per_second]


def test_rendered_reconcile_params_follow_custom_config():
    cfg = NetworkLoadConfig(fortio_namespaces=4, fortio_client_queries_per_second=250, group_name="grp")
    doc = _render(cfg)
    reconcile = next(
        step["module"]["params"]
        for step in doc["steps"]
        if "module" in step and step["module"]["path"] == "/modules/reconcile-objects.yaml"
    )
    assert reconcile["namespaces"] == 4
    assert reconcile["fortioClientQueriesPerSecond"] == 250
    assert reconcile["Group"] == "grp"
    assert reconcile["operationTimeout"] == cfg.operation_timeout


def test_no_placeholders_left_after_render():
    rendered = render_template(CONFIG_TEMPLATE, new_network_load_config())
    assert "{{" not in rendered
    assert "}}" not in rendered