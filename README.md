# scaletest

`scaletest` assembles Kubernetes scale tests out of small steps: install the
tools and add-ons a test needs, render a scenario's configuration file, and
hand it to a load generator, clusterloader2 or kube-burner.

It is a library; it installs no command-line program.

## Workflows and steps

`scaletest.workflow` holds the machinery everything else is built on.

- Any object with a `do()` method is a step; `Step` is the abstract base.
- `pipe(a, b, c)` chains steps so each runs after the one before it.
- `batch_pipe(x, y, z)` chains groups: every step of a group runs after every
  step of the group before. A group may be a step, a `pipe`, or a collection
  of steps.
- `Workflow().add(...)` collects steps and graphs; `Workflow.do()` runs them in
  dependency order. A `Workflow` is itself a step, so workflows nest.
- When a step raises, the steps that depend on it are skipped, the remaining
  independent steps still run, and `do()` then raises `WorkflowError`, whose
  `errors` attribute lists each failed step with its exception. A dependency
  cycle also raises `WorkflowError`.

`Executor` and `Provider` are the abstract interfaces that
`run_scenarios(provider, executor)` works with. It runs, strictly in this
order, the provider's `get_steps()`, the executor's `get_setup_workflow()`,
and one `get_run_workflow(template)` per template from
`get_scenario_templates()`. A failure is raised as
`WorkflowError("failed to run workflow")`.

## Scenarios

Scenario configs are dataclasses that carry their own template text
(`get_template()`), with `{{ .Field }}` placeholders:

- `scaletest.scenarios.uniformqps.UniformQPSConfig` (clusterloader2;
  `replicas_per_namespace`, default 1).
- `scaletest.scenarios.networkload.NetworkLoadConfig` (clusterloader2; fortio
  namespace, deployment, replica and QPS counts, `group_name="fortio"`,
  `operation_timeout="5m"`).
- `scaletest.scenarios.netpolchurn.NetpolChurnConfig` (kube-burner;
  `job_iterations`, default 20). `new_netpol_churn_config()` takes the count
  from `NETPOL_CHURN_JOB_ITERATIONS` when it holds a valid integer.
- `scaletest.scenarios.apiintensive.ApiIntensiveConfig` (kube-burner;
  `job_iterations=700`).

Two registries name the scenarios:

- `scaletest.scenarios.clusterloader2`: `UniformQPS` and `HighTrafficLoad`,
  chosen with `CL2_SCENARIO`. `get_scenario_steps(name)` returns a scenario's
  templates.
- `scaletest.scenarios.kubeburner`: `netpolchurn`, chosen with `KB_SCENARIO`.

Both offer `available_scenarios()`, `get_scenario_from_env()` and
`generate_all_scenario_yaml()`. When the variable is unset or names an unknown
scenario, `get_scenario_from_env()` logs the available names and raises
`LookupError`.

## Generating configuration files

```python
from scaletest.scenarios import clusterloader2, kubeburner

paths = clusterloader2.generate_all_scenario_yaml()
paths += kubeburner.generate_all_scenario_yaml()
```

`scaletest.templating.create_yaml_file(config)` renders one config to
`config_generated.yaml`, starting with a "do not edit" notice. The file goes
into a directory that mirrors the config's module path, under the nearest
directory at or above the working directory that holds a `pyproject.toml`
(or under the working directory when there is none); see
`scaletest.pkgpath.get_package_path`. `render_template(text, data)` does the
substitution on its own: `{{ .FortioNamespaces }}` is looked up as
`FortioNamespaces` or `fortio_namespaces`, booleans render as `true`/`false`,
and an unknown field or any other kind of action raises `ValueError`.
`CreateYaml` is the step form and `generate_yaml(config)` wraps it in a
workflow.

## Executors

- `scaletest.executors.clusterloader2.ClusterLoader2Executor(scenario,
  setup_steps, options=ExecutorOptions())`: each run renders the config, then
  runs `tools/bin/clusterloader2` from the config's directory with an
  `output/` report directory beside it. `ExecutorOptions` defaults to
  `~/.kube/config` and provider `kind`. While it runs, a background watcher
  uses `kubectl` to delete the `master` ServiceMonitor in the `monitoring`
  namespace whenever it appears.
- `scaletest.executors.kubeburner.KubeBurnerExecutor(scenario, setup_steps)`:
  each run renders the config, then runs `tools/bin/kube-burner init --config
  config_generated.yaml` from the config's directory.

Tool installation, skipped when the binary already exists:

- `run_install_clusterloader2_cli()` clones the perf-tests repository into
  `tools/src`, builds clusterloader2 with Go and moves it to `tools/bin`.
- `run_install_kube_burner_cli()` downloads the kube-burner 1.16.0 Linux
  x86-64 release (`InstallKubeBurnerCLI(version=...)` for another) and extracts
  the binary with `extract_kube_burner_binary`.

## Infrastructure steps

- `scaletest.infrastructure.cilium`: `InstallCiliumStep(namespace="kube-system")`
  installs Cilium with the `helm` CLI, or upgrades the release when one
  exists, using `cilium_values()` (Kubernetes IPAM, Hubble with relay, UI and
  metrics, operator and agent Prometheus metrics). `run_install_cilium()`
  wraps it in a workflow.
- `scaletest.infrastructure.azure`: `GetKubeConfig(cluster_name,
  resource_group_name, subscription_id)` runs `az aks get-credentials` and
  writes the kubeconfig with mode 0600 to `~/.kube/config` (or
  `kubeconfig_path`). `get_existing_azure_cluster()` wraps it in a workflow.

## Other helpers

- `scaletest.welcome.Intro` logs the versions of `tools/bin/kind`,
  `tools/bin/kube-burner` and the running Python; tools that fail are logged
  as warnings.
- `scaletest.retry.Retrier(attempts, delay, exp_backoff=False)`: `do(func,
  timeout=None)` calls `func` until it succeeds, sleeping `delay` seconds
  after each failure (doubling it with back-off), returns its result or
  re-raises the last exception, and raises `TimeoutError` if the attempts do
  not finish within `timeout` seconds.

## Putting it together

```python
from scaletest.executors.clusterloader2 import (
    ClusterLoader2Executor, ExecutorOptions, run_install_clusterloader2_cli,
)
from scaletest.infrastructure.azure import get_existing_azure_cluster
from scaletest.scenarios.clusterloader2 import get_scenario_from_env
from scaletest.welcome import Intro
from scaletest.workflow import Provider, pipe, run_scenarios


class ExistingAKS(Provider):
    name = "AKS existing cluster"

    def get_steps(self):
        return pipe(get_existing_azure_cluster())


executor = ClusterLoader2Executor(
    get_scenario_from_env(),
    pipe(run_install_clusterloader2_cli(), Intro()),
    ExecutorOptions(provider="aks"),
)
run_scenarios(ExistingAKS(), executor)
```

## What it does not do

- It has no ready-made cluster providers and no provider registry: there is
  no step that installs kind or creates a kind cluster, and nothing selects a
  provider from the environment. Write a `Provider` subclass, as above.
- It has no Prometheus installation step and no port forwarding.
- It offers no command-line program; drive it from Python.

## Requirements

- Python 3.10 or later and PyYAML.
- For real runs, on Linux x86-64: Git and Go (to build clusterloader2),
  `kubectl`, `helm` for Cilium, and the Azure CLI for AKS.