"""Registry of kube-burner scenarios and generation of their configs."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from scaletest.scenarios.netpolchurn import new_netpol_churn_config
from scaletest.templating import CreateYaml, Template
from scaletest.workflow import Workflow, WorkflowError, pipe

logger = logging.getLogger(__name__)

KB_SCENARIO_ENV = "KB_SCENARIO"


@dataclass
class KubeBurnerScenario:
    """A named kube-burner scenario made of one or more templates."""

    name: str
    templates: list[Template] = field(default_factory=list)

    def get_templates(self) -> list[Template]:
        return self.templates


_REGISTRY: dict[str, KubeBurnerScenario] = {
    "netpolchurn": KubeBurnerScenario("netpolchurn", [new_netpol_churn_config()]),
}


def available_scenarios() -> list[str]:
    """Return the names of the registered scenarios, sorted."""
    return sorted(_REGISTRY)


def get_scenario_from_env() -> KubeBurnerScenario:
    """Return the scenario named by the KB_SCENARIO environment variable."""
    name = os.environ.get(KB_SCENARIO_ENV, "")
    if not name:
        logger.error(
            "%s not set. Please set the environment variable to one of the available scenarios: %s",
            KB_SCENARIO_ENV,
            available_scenarios(),
        )
        raise LookupError(f"{KB_SCENARIO_ENV} not set")
    scenario = _REGISTRY.get(name)
    if scenario is None:
        logger.error("Scenario not found: requested=%s available=%s", name, available_scenarios())
        raise LookupError("scenario not found")
    return scenario


def generate_all_scenario_yaml() -> list[Path]:
    """Write the generated config of every registered scenario; return the written paths."""
    steps = [CreateYaml(template) for scenario in _REGISTRY.values() for template in scenario.get_templates()]
    root = Workflow().add(pipe(*(Workflow().add(step) for step in steps)))
    try:
        root.do()
    except WorkflowError as err:
        raise WorkflowError(err.errors, "failed to generate kube-burner scenario YAML files") from err
    return [step.output_config for step in steps]