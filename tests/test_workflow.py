from dataclasses import dataclass, field

import pytest

from scaletest.workflow import (
    Executor,
    Provider,
    Step,
    Workflow,
    WorkflowError,
    batch_pipe,
    pipe,
    run_scenarios,
)


@dataclass(eq=False)
class Record(Step):
    name: str
    log: list
    fail: bool = False

    def do(self):
        if self.fail:
            raise RuntimeError(f"{self.name} failed")
        self.log.append(self.name)


def test_pipe_runs_in_order():
    log = []
    steps = [Record(n, log) for n in ("a", "b", "c")]
    result = Workflow().add(pipe(*steps)).do()
    assert result is None
    assert log == ["a", "b", "c"]


def test_failure_skips_dependents():
    log = []
    bad = Record("b", log, fail=True)
    with pytest.raises(WorkflowError) as info:
        Workflow().add(pipe(Record("a", log), bad, Record("c", log))).do()
    assert log == ["a"]
    assert info.value.errors[0][0] is bad
    assert "b failed" in str(info.value)


def test_independent_steps_still_run():
    log = []
    with pytest.raises(WorkflowError):
        Workflow().add(Record("x", log, fail=True), Record("y", log)).do()
    assert log == ["y"]


def test_batch_pipe_orders_batches():
    log = []
    a, b, c = Record("a", log), Record("b", log), Record("c", log)
    result = Workflow().add(batch_pipe(pipe(c), [a, b])).do()
    assert result is None
    assert log[0] == "c"
    assert sorted(log[1:]) == ["a", "b"]


def test_batch_pipe_failure_blocks_next_batch():
    log = []
    with pytest.raises(WorkflowError):
        Workflow().add(batch_pipe([Record("a", log, fail=True), Record("b", log)], Record("c", log))).do()
    assert log == ["b"]


def test_nested_workflow_is_a_step():
    log = []
    inner = Workflow().add(pipe(Record("x", log), Record("y", log)))
    Workflow().add(pipe(inner, Record("z", log))).do()
    assert log == ["x", "y", "z"]


def test_nested_failure_propagates():
    log = []
    inner = Workflow().add(Record("x", log, fail=True))
    with pytest.raises(WorkflowError) as info:
        Workflow().add(pipe(inner, Record("z", log))).do()
    assert log == []
    assert info.value.errors[0][0] is inner


def test_same_step_runs_once():
    log = []
    step = Record("once", log)
    result = Workflow().add(step, step, pipe(step)).do()
    assert result is None
    assert log == ["once"]


def test_cycle_is_reported():
    log = []
    a, b = Record("a", log), Record("b", log)
    with pytest.raises(WorkflowError, match="cycle"):
        Workflow().add(pipe(a, b), pipe(b, a)).do()
    assert log == []


def test_add_rejects_non_steps():
    with pytest.raises(TypeError):
        Workflow().add(42)


def test_abstract_bases_cannot_be_instantiated():
    with pytest.raises(TypeError):
        Executor()
    with pytest.raises(TypeError):
        Provider()


@dataclass
class FakeProvider(Provider):
    log: list
    fail: bool = False

    def get_steps(self):
        return pipe(Record("cluster", self.log, self.fail), Record("addon", self.log))


@dataclass
class FakeExecutor(Executor):
    log: list
    templates: list = field(default_factory=lambda: ["t1", "t2"])

    def get_run_workflow(self, template):
        return Workflow().add(Record(template, self.log))

    def get_setup_workflow(self):
        return pipe(Record("setup", self.log))

    def get_scenario_templates(self):
        return self.templates


def test_run_scenarios_order():
    log = []
    run_scenarios(FakeProvider(log), FakeExecutor(log))
    assert log == ["cluster", "addon", "setup", "t1", "t2"]


def test_run_scenarios_failure():
    log = []
    with pytest.raises(WorkflowError, match="failed to run workflow"):
        run_scenarios(FakeProvider(log, fail=True), FakeExecutor(log))
    assert log == []