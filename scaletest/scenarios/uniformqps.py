"""Uniform QPS scenario for clusterloader2: a deployment created at a steady rate."""

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


def _bpf_map_pressure(action: str) -> dict:
    return {
        "Identifier": "CiliumBPFMapPressure",
        "Method": "GenericPrometheusQuery",
        "Params": {
            "action": action,
            "metricName": "Cilium BPF Map Pressure",
            "metricVersion": "v1",
            "unit": "%",
            "dimensions": ["map_name"],
            "queries": [
                {
                    "name": "Max BPF Map Pressure",
                    "query": "max(cilium_bpf_map_pressure)",
                    "threshold": 90,
                }
            ],
        },
    }


def _gather(identifier: str) -> dict:
    return {"Identifier": identifier, "Method": identifier, "Params": {"action": "gather"}}


_DOCUMENT = {
    "name": "test",
    "namespace": {"number": 1},
    "tuningSets": [{"name": "Uniform1qps", "qpsLoad": {"qps": 1}}],
    "steps": [
        {
            "name": "Start measurements",
            "measurements": [
                {
                    "Identifier": "PodStartupLatency",
                    "Method": "PodStartupLatency",
                    "Params": {
                        "action": "start",
                        "labelSelector": "group = test-pod",
                        "threshold": "20s",
                    },
                },
                {
                    "Identifier": "WaitForControlledPodsRunning",
                    "Method": "WaitForControlledPodsRunning",
                    "Params": {
                        "action": "start",
                        "apiVersion": "apps/v1",
                        "kind": "Deployment",
                        "labelSelector": "group = test-deployment",
                        "operationTimeout": "120s",
                    },
                },
                _bpf_map_pressure("start"),
            ],
        },
        {
            "name": "Create deployment",
            "phases": [
                {
                    "namespaceRange": {"min": 1, "max": 1},
                    "replicasPerNamespace": _field("ReplicasPerNamespace"),
                    "tuningSet": "Uniform1qps",
                    "objectBundle": [
                        {
                            "basename": "test-deployment",
                            "objectTemplatePath": "./templates/deployment.yaml",
                            "templateFillMap": {"Replicas": 10},
                        }
                    ],
                }
            ],
        },
        {
            "name": "Wait for pods to be running",
            "measurements": [_gather("WaitForControlledPodsRunning")],
        },
        {
            "name": "Measure pod startup latency",
            "measurements": [_gather("PodStartupLatency")],
        },
        {
            "name": "Measure Cilium Metrics",
            "measurements": [_bpf_map_pressure("gather")],
        },
    ],
}

CONFIG_TEMPLATE = _as_template(_DOCUMENT)


@dataclass
class UniformQPSConfig(Template):
    """Parameters of the uniform QPS scenario."""

    replicas_per_namespace: int = 1

    def get_template(self) -> str:
        return CONFIG_TEMPLATE


def new_uniform_qps_config() -> UniformQPSConfig:
    """Return the uniform QPS scenario with its default parameters."""
    return UniformQPSConfig()