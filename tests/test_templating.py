from dataclasses import dataclass

import pytest
import yaml

from scaletest.templating import (
    GENERATED_NOTICE,
    CreateYaml,
    Template,
    create_yaml_file,
    generate_yaml,
    render_template,
)
from scaletest.workflow import Workflow


@dataclass
class DemoConfig(Template):
    replicas: int = 3
    group_name: str = "fortio"

    def get_template(self):
        return "name: {{ .GroupName }}\nreplicas: {{.Replicas}}\n"


DemoConfig.__module__ = "demo.scenario"


@dataclass
class Simple:
    Count: int
    Name: str


@dataclass
class Snake:
    api_server_calls_per_second: int
    enabled: bool


def test_render_fields():
    assert render_template("a {{ .Count }} b {{.Name}}", Simple(3, "x")) == "a 3 b x"


def test_render_camel_case_maps_to_snake_case():
    out = render_template("qps: {{ .APIServerCallsPerSecond }} on: {{ .Enabled }}", Snake(10, True))
    assert out == "qps: 10 on: true"


def test_render_mapping():
    assert render_template("{{ .Count }}", {"count": 7}) == "7"


def test_render_text_without_actions_unchanged():
    text = "plain: value\n"
    assert render_template(text, Simple(1, "y")) == text


def test_missing_field_raises():
    with pytest.raises(ValueError, match="Missing"):
        render_template("{{ .Missing }}", Simple(1, "y"))


def test_unsupported_action_raises():
    with pytest.raises(ValueError, match="parse"):
        render_template("{{ if .Count }}x{{ end }}", Simple(1, "y"))


def test_unclosed_action_raises():
    with pytest.raises(ValueError, match="unclosed"):
        render_template("value: {{ .Count", Simple(1, "y"))


def test_template_is_abstract():
    with pytest.raises(TypeError):
        Template()


@pytest.fixture
def project(tmp_path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text("")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_create_yaml_file(project):
    config = DemoConfig()
    path = create_yaml_file(config)
    assert path == project / "demo" / "scenario" / "config_generated.yaml"
    content = path.read_text(encoding="utf-8")
    assert content.startswith(GENERATED_NOTICE)
    assert yaml.safe_load(content) == {"name": "fortio", "replicas": 3}


def test_create_yaml_step_sets_output(project):
    step = CreateYaml(DemoConfig(replicas=5))
    step.do()
    assert step.output_config == project / "demo" / "scenario" / "config_generated.yaml"
    assert yaml.safe_load(step.output_config.read_text())["replicas"] == 5


def test_generate_yaml_workflow(project):
    workflow = generate_yaml(DemoConfig(group_name="load"))
    assert isinstance(workflow, Workflow)
    assert workflow.do() is None
    written = project / "demo" / "scenario" / "config_generated.yaml"
    assert yaml.safe_load(written.read_text())["name"] == "load"
    assert create_yaml_file(DemoConfig(group_name="load")) == written