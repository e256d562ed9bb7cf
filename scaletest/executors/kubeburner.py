"""Executor that runs scenarios with kube-burner."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from scaletest.executors.kb_steps import InstallKubeBurnerCLI, KubeBurner
from scaletest.templating import CreateYaml, Template
from scaletest.workflow import Executor, Step, Workflow, pipe

KUBE_BURNER_NAMESPACE = "kube-burner"


@dataclass(eq=False)
class _RunWithGeneratedConfig(Step):
    """Hands the config written by a CreateYaml step to the kube-burner run."""

    generate: CreateYaml
    run: KubeBurner

    @property
    def name(self) -> str:
        return type(self.run).__name__

    def do(self) -> None:
        self.run.config_path = self.generate.output_config
        self.run.do()


class KubeBurnerExecutor(Executor):
    """Generates each scenario config and runs kube-burner on it."""

    def __init__(self, scenario: Any, setup_steps: Any) -> None:
        self.scenario = scenario
        self.setup_steps = setup_steps

    def get_scenario_templates(self) -> list[Template]:
        return self.scenario.get_templates()

    def get_run_workflow(self, template: Template) -> Workflow:
        create_yaml = CreateYaml(template)
        run_kube_burner = KubeBurner(namespace=KUBE_BURNER_NAMESPACE)
        return Workflow().add(pipe(create_yaml, _RunWithGeneratedConfig(create_yaml, run_kube_burner)))

    def get_setup_workflow(self) -> Any:
        return self.setup_steps


def run_install_kube_burner_cli() -> Workflow:
    """Return a workflow that installs the kube-burner binary."""
    return Workflow().add(pipe(InstallKubeBurnerCLI()))