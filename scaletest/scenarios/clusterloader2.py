"""Registry of clusterloader2 scenarios and generation of their configs."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from scaletest.scenarios.networkload import new_network_load_config
from scaletest.scenarios.uniformqps import new_uniform_qps_config
from scaletest.templating import CreateYaml, Template
from scaletest.workflow import Workflow, WorkflowError, pipe

logger = logging.getLogger(__name__)

CL2_SCENARIO_ENV = "CL2_SCENARIO"


@dataclass
class ClusterLoader2Scenario:
    """A named clusterloader2 scenario made of one or more templates."""

    name: str
    templates: list[Template] = field(default_factory=list)

    def get_templates(self) -> list[Template]:
        return self.templates


_REGISTRY: dict[str, ClusterLoader2Scenario] = {
    "UniformQPS": ClusterLoader2Scenario("UniformQPS", [new_uniform_qps_config()]),
    "HighTrafficLoad": ClusterLoader2Scenario("HighTrafficLoad", [new_network_load_config()]),
}


def available_scenarios() -> list[str]:
    """Return the names of the registered scenarios, sorted."""
    return sorted(_REGISTRY)


def get_scenario_steps(scenario_name: str) -> list[Template]:
    """Return the templates of the named scenario."""
    try:
        return _REGISTRY[scenario_name].get_templates()
    except KeyError:
        raise LookupError("Scenario not found") from None


def get_scenario_from_env() -> ClusterLoader2Scenario:
    """Return the scenario named by the CL2_SCENARIO environment variable."""
    name = os.environ.get(CL2_SCENARIO_ENV, "")
    if not name:
        logger.error(
            "%s not set. Please set the environment variable to one of the available scenarios: %s",
            CL2_SCENARIO_ENV,
            available_scenarios(),
        )
        raise LookupError(f"{CL2_SCENARIO_ENV} not set")
    scenario = _REGISTRY.get(name)
    if scenario is None:
        logger.error("Scenario not found: requested=%s available=%s", name, available_scenarios())
        raise LookupError("Scenario not found")
    return scenario


def generate_all_scenario_yaml() -> list[Path]:
    """Write the generated config of every registered scenario; return the written paths."""
    steps = [CreateYaml(template) for scenario in _REGISTRY.values() for template in scenario.get_templates()]
    root = Workflow().add(pipe(*(Workflow().add(step) for step in steps)))
    try:
        root.do()
    except WorkflowError as err:
        raise WorkflowError(err.errors, "failed to generate clusterloader2 scenario YAML files") from err
    return [step.output_config for step in steps]