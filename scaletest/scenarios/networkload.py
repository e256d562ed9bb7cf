"""Network load scenario for clusterloader2: fortio clients and servers under policy."""

from __future__ import annotations

import re
from dataclasses import dataclass

import yaml

from scaletest.templating import Template

_PLACEHOLDER = re.compile(r"__([A-Za-z][A-Za-z0-9]*)__")


def _field(name: str) -> str:
    return f"__{name}__"


def _as_template(document: dict) -> str:
    text = yaml.safe_dump(document, sort_keys=False, default_flow_style=False, width=10_000)
    return _PLACEHOLDER.sub(lambda match: "{{ ." + match.group(1) + " }}", text)


def _log_step(pairs: list[tuple[str, str]], duration: str) -> dict:
    name = "Log - " + ", ".join(f"{label}={_field(field)}" for label, field in pairs)
    return {
        "name": name,
        "measurements": [
            {
                "Identifier": "Dummy",
                "Method": "Sleep",
                "Params": {"action": "start", "duration": duration},
            }
        ],
    }


def _module(path: str, **params) -> dict:
    return {"module": {"path": path, "params": params}}


def _qps_tuning(name: str) -> dict:
    return {"name": name, "qpsLoad": {"qps": _field("APIServerCallsPerSecond")}}


_DOCUMENT = {
    "name": "load-config",
    "namespace": {
        "number": _field("FortioNamespaces"),
        "prefix": "ns",
        "deleteAutomanagedNamespaces": False,
        "enableExistingNamespaces": True,
    },
    "tuningSets": [
        {"name": "Sequence", "parallelismLimitedLoad": {"parallelismLimit": 1}},
        _qps_tuning("DeploymentCreateQps"),
        _qps_tuning("DeploymentDeleteQps"),
    ],
    "steps": [
        _log_step(
            [
                ("fortioNamespaces", "FortioNamespaces"),
                ("fortioServerDeployments", "FortioServerDeployments"),
                ("fortioClientDeployments", "FortioClientDeployments"),
                ("fortioServerReplicasPerDeployment", "FortioServerReplicasPerDeployment"),
                ("fortioServerDeploymentReplicasPerNamespace", "FortioServerDeploymentReplicasPerNamespace"),
                ("fortioServiceReplicasPerNamespace=", "FortioServiceReplicasPerNamespace"),
            ],
            "1ms",
        ),
        _module("/modules/measurements.yaml", action="start", group=_field("GroupName")),
        _module("/modules/cilium-measurements.yaml", action="start"),
        _module(
            "/modules/services.yaml",
            actionName="Creating",
            namespaces=_field("FortioNamespaces"),
            fortioServiceReplicasPerNamespace=_field("FortioServiceReplicasPerNamespace"),
        ),
        _module(
            "/modules/ciliumnetworkpolicy.yaml",
            actionName="Creating",
            namespaces=_field("FortioNamespaces"),
            Group=_field("GroupName"),
            cnpsPerNamespace=1,
        ),
        _module(
            "/modules/reconcile-objects.yaml",
            actionName="create",
            tuningSet="DeploymentCreateQps",
            operationTimeout=_field("OperationTimeout"),
            Group=_field("GroupName"),
            namespaces=_field("FortioNamespaces"),
            fortioServerDeployments=_field("FortioServerDeployments"),
            fortioClientDeployments=_field("FortioClientDeployments"),
            fortioServerDeploymentReplicasPerNamespace=_field("FortioServerDeploymentReplicasPerNamespace"),
            fortioClientDeploymentReplicasPerNamespace=_field("FortioClientDeploymentReplicasPerNamespace"),
            fortioServerReplicasPerDeployment=_field("FortioServerReplicasPerDeployment"),
            fortioClientReplicasPerDeployment=_field("FortioClientReplicasPerDeployment"),
            fortioClientQueriesPerSecond=_field("FortioClientQueriesPerSecond"),
            deploymentLabel="start",
        ),
        _log_step(
            [
                ("fortioNamespaces", "FortioNamespaces"),
                ("fortioServerDeployments", "FortioServerDeployments"),
                ("fortioClientDeployments", "FortioClientDeployments"),
                ("fortioServerReplicasPerDeployment", "FortioServerReplicasPerDeployment"),
            ],
            "1m30s",
        ),
        _module("/modules/cilium-measurements.yaml", action="gather"),
    ],
}

CONFIG_TEMPLATE = _as_template(_DOCUMENT)


@dataclass
class NetworkLoadConfig(Template):
    """Parameters of the network load scenario."""

    fortio_namespaces: int = 1
    api_server_calls_per_second: int = 10
    fortio_server_deployments: int = 1
    fortio_client_deployments: int = 1
    fortio_server_replicas_per_deployment: int = 1
    fortio_client_replicas_per_deployment: int = 1
    fortio_server_deployment_replicas_per_namespace: int = 1
    fortio_client_deployment_replicas_per_namespace: int = 1
    fortio_service_replicas_per_namespace: int = 1
    fortio_client_queries_per_second: int = 100
    group_name: str = "fortio"
    operation_timeout: str = "5m"

    def get_template(self) -> str:
        return CONFIG_TEMPLATE


def new_network_load_config() -> NetworkLoadConfig:
    """Return the network load scenario with its default parameters."""
    return NetworkLoadConfig()