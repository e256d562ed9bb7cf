"""Executor that runs scenarios with clusterloader2."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from scaletest.executors.cl2_steps import DEFAULT_KUBECONFIG, ClusterLoader2, InstallClusterLoader2CLI
from scaletest.templating import CreateYaml, Template
from scaletest.workflow import Executor, Step, Workflow, pipe


@dataclass
class ExecutorOptions:
    """Settings passed to every clusterloader2 run."""

    kubeconfig: str = DEFAULT_KUBECONFIG
    provider: str = "kind"


@dataclass(eq=False)
class _RunWithGeneratedConfig(Step):
    """Hands the config written by a CreateYaml step to the clusterloader2 run."""

    generate: CreateYaml
    run: ClusterLoader2

    @property
    def name(self) -> str:
        return type(self.run).__name__

    def do(self) -> None:
        self.run.config_path = self.generate.output_config
        self.run.do()


class ClusterLoader2Executor(Executor):
    """Generates each scenario config and runs clusterloader2 on it."""

    def __init__(self, scenario: Any, setup_steps: Any, options: ExecutorOptions | None = None) -> None:
        self.scenario = scenario
        self.setup_steps = setup_steps
        self.options = options if options is not None else ExecutorOptions()

    def get_scenario_templates(self) -> list[Template]:
        return self.scenario.get_templates()

    def get_run_workflow(self, template: Template) -> Workflow:
        create_yaml = CreateYaml(template)
        run_cl2 = ClusterLoader2(kubeconfig=self.options.kubeconfig, provider=self.options.provider)
        return Workflow().add(pipe(create_yaml, _RunWithGeneratedConfig(create_yaml, run_cl2)))

    def get_setup_workflow(self) -> Any:
        return self.setup_steps


def run_install_clusterloader2_cli() -> Workflow:
    """Return a workflow that installs the clusterloader2 binary."""
    return Workflow().add(pipe(InstallClusterLoader2CLI()))