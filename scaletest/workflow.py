"""Step graphs: run steps in dependency order and stitch scenario runs together."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

logger = logging.getLogger(__name__)


class Step(ABC):
    """A unit of work that a workflow runs."""

    @abstractmethod
    def do(self) -> None:
        """Perform the step, raising on failure."""


def _is_step(obj: Any) -> bool:
    return callable(getattr(obj, "do", None))


def _step_name(step: Any) -> str:
    name = getattr(step, "name", None)
    return name if isinstance(name, str) and name else type(step).__name__


class WorkflowError(Exception):
    """Raised when one or more steps of a workflow fail."""

    def __init__(self, errors: Iterable[tuple[Any, BaseException]] = (), message: str = "workflow failed"):
        self.errors = list(errors)
        self.message = message
        detail = "; ".join(f"{_step_name(step)}: {exc}" for step, exc in self.errors)
        super().__init__(f"{message}: {detail}" if detail else message)


class _StepGraph:
    """Steps keyed by identity, each with the steps it depends on."""

    def __init__(self) -> None:
        self._nodes: dict[int, Any] = {}
        self._deps: dict[int, list[int]] = {}

    def add_step(self, step: Any) -> None:
        if not _is_step(step):
            raise TypeError(f"{step!r} is not a step: it has no do() method")
        key = id(step)
        if key not in self._nodes:
            self._nodes[key] = step
            self._deps[key] = []

    def add_dependency(self, step: Any, dependency: Any) -> None:
        self.add_step(step)
        self.add_step(dependency)
        deps = self._deps[id(step)]
        if id(dependency) not in deps:
            deps.append(id(dependency))

    def merge(self, other: _StepGraph) -> None:
        for key, step in other._nodes.items():
            self.add_step(step)
            for dep in other._deps[key]:
                self.add_dependency(step, other._nodes[dep])

    @property
    def steps(self) -> list[Any]:
        return list(self._nodes.values())

    def dependencies(self, step: Any) -> list[Any]:
        return [self._nodes[key] for key in self._deps[id(step)]]

    def order(self) -> list[Any]:
        done: set[int] = set()
        ordered: list[Any] = []
        pending = list(self._nodes)
        while pending:
            ready = next((key for key in pending if all(dep in done for dep in self._deps[key])), None)
            if ready is None:
                names = ", ".join(_step_name(self._nodes[key]) for key in pending)
                raise WorkflowError(message=f"dependency cycle among steps: {names}")
            pending.remove(ready)
            done.add(ready)
            ordered.append(self._nodes[ready])
        return ordered


def _as_graph(item: Any) -> _StepGraph:
    if isinstance(item, _StepGraph):
        return item
    graph = _StepGraph()
    if _is_step(item):
        graph.add_step(item)
    elif isinstance(item, Iterable) and not isinstance(item, (str, bytes)):
        for element in item:
            graph.merge(_as_graph(element))
    else:
        raise TypeError(f"{item!r} is neither a step nor a collection of steps")
    return graph


def pipe(*args: Any) -> _StepGraph:
    """Chain steps so that each one runs after the one before it."""
    graph = _StepGraph()
    previous = None
    for step in args:
        graph.add_step(step)
        if previous is not None:
            graph.add_dependency(step, previous)
        previous = step
    return graph


def batch_pipe(*args: Any) -> _StepGraph:
    """Chain batches: every step of a batch runs after every step of the batch before."""
    graph = _StepGraph()
    previous: list[Any] = []
    for batch in args:
        batch_graph = _as_graph(batch)
        graph.merge(batch_graph)
        steps = batch_graph.steps
        if not steps:
            continue
        for step in steps:
            for dependency in previous:
                graph.add_dependency(step, dependency)
        previous = steps
    return graph


class Workflow(Step):
    """A set of steps run in dependency order; itself usable as a step."""

    def __init__(self) -> None:
        self._graph = _StepGraph()

    def add(self, *args: Any) -> Workflow:
        """Add steps, step graphs or collections of them; returns the workflow."""
        for arg in args:
            self._graph.merge(_as_graph(arg))
        return self

    def do(self) -> None:
        """Run every step; steps whose dependencies failed are skipped."""
        failed: set[int] = set()
        errors: list[tuple[Any, BaseException]] = []
        for step in self._graph.order():
            if any(id(dep) in failed for dep in self._graph.dependencies(step)):
                logger.warning("skipping step %s: a dependency failed", _step_name(step))
                failed.add(id(step))
                continue
            try:
                step.do()
            except Exception as exc:
                logger.error("step %s failed: %s", _step_name(step), exc)
                failed.add(id(step))
                errors.append((step, exc))
        if errors:
            raise WorkflowError(errors)


class Executor(ABC):
    """Runs scenario templates with a particular load tool."""

    @abstractmethod
    def get_run_workflow(self, template: Any) -> Workflow:
        """Return the workflow that runs one scenario template."""

    @abstractmethod
    def get_setup_workflow(self) -> Any:
        """Return the steps that prepare the executor."""

    @abstractmethod
    def get_scenario_templates(self) -> list[Any]:
        """Return the templates of the scenario to run."""


class Provider(ABC):
    """Supplies the steps that set up a cluster."""

    name: str = ""

    @abstractmethod
    def get_steps(self) -> Any:
        """Return the cluster setup steps."""


def run_scenarios(provider: Provider, executor: Executor) -> None:
    """Set up the cluster, then the executor, then run every scenario in order."""
    templates = executor.get_scenario_templates()
    for template in templates:
        module = type(template).__module__
        logger.info("scenario %s (%s)", module.rpartition(".")[2], module)

    scenario_steps = [executor.get_run_workflow(template) for template in templates]
    root = Workflow().add(
        batch_pipe(
            provider.get_steps(),
            executor.get_setup_workflow(),
            pipe(*scenario_steps),
        )
    )
    try:
        root.do()
    except WorkflowError as err:
        raise WorkflowError(err.errors, "failed to run workflow") from err