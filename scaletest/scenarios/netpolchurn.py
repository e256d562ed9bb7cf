"""Network policy churn scenario for kube-burner."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

import yaml

from scaletest.templating import Template

JOB_ITERATIONS_ENV = "NETPOL_CHURN_JOB_ITERATIONS"
DEFAULT_JOB_ITERATIONS = 20

_INTEGER = re.compile(r"[+-]?[0-9]+")
_PLACEHOLDER = re.compile(r"__([A-Za-z][A-Za-z0-9]*)__")


def _field(name: str) -> str:
    return f"__{name}__"


def _as_template(document: dict) -> str:
    text = yaml.safe_dump(document, sort_keys=False, default_flow_style=False, width=10_000)
    return _PLACEHOLDER.sub(lambda match: "{{ ." + match.group(1) + " }}", text)


_POD_SECURITY_LABELS = {
    "security.openshift.io/scc.podSecurityLabelSync": False,
    "pod-security.kubernetes.io/enforce": "privileged",
    "pod-security.kubernetes.io/audit": "privileged",
    "pod-security.kubernetes.io/warn": "privileged",
}


def _job(name: str, preload_period: str, pause: str, extra: dict, labels: dict, objects: list[dict]) -> dict:
    job = {
        "name": name,
        "namespace": "network-policy-perf",
        "jobIterations": _field("JobIterations"),
        "qps": 20,
        "burst": 20,
        "namespacedIterations": True,
        "podWait": True,
        "waitWhenFinished": True,
        "preLoadImages": True,
        "preLoadPeriod": preload_period,
        "jobPause": pause,
    }
    job.update(extra)
    job["namespaceLabels"] = labels
    job["objects"] = objects
    return job


_DOCUMENT = {
    "metricsEndpoints": [
        {
            "endpoint": "http://localhost:9090",
            "step": "30s",
            "skipTLSVerify": True,
            "metrics": ["./metrics/metrics-cilium.yaml"],
            "indexer": {"type": "local", "metricsDirectory": "./output/"},
        }
    ],
    "jobs": [
        _job(
            "network-policy-perf-pods",
            "10s",
            "60s",
            {"skipIndexing": True},
            {"kube-burner.io/skip-networkpolicy-latency": True, **_POD_SECURITY_LABELS},
            [
                {"objectTemplate": "./templates/pod.yml", "replicas": 2},
                {"objectTemplate": "./templates/np-deny-all.yml", "replicas": 1},
                {"objectTemplate": "./templates/np-allow-from-proxy.yml", "replicas": 1},
            ],
        ),
        _job(
            "network-policy-perf",
            "60s",
            "120s",
            {"cleanup": True},
            dict(_POD_SECURITY_LABELS),
            [
                {
                    "objectTemplate": "./templates/ingress-np.yml",
                    "replicas": 1,
                    "inputVars": {
                        "namespaces": 9,
                        "pods_per_namespace": 2,
                        "netpols_per_namespace": 1,
                        "local_pods": 1,
                        "pod_selectors": 1,
                        "single_ports": 1,
                        "port_ranges": 1,
                        "peer_namespaces": 2,
                        "peer_pods": 2,
                        "cidr_rules": 1,
                    },
                }
            ],
        ),
    ],
}

CONFIG_TEMPLATE = _as_template(_DOCUMENT)


@dataclass
class NetpolChurnConfig(Template):
    """Parameters of the network policy churn scenario."""

    job_iterations: int = DEFAULT_JOB_ITERATIONS

    def get_template(self) -> str:
        return CONFIG_TEMPLATE


def new_netpol_churn_config() -> NetpolChurnConfig:
    """Return the scenario, taking the iteration count from the environment when it is a valid integer."""
    job_iterations = DEFAULT_JOB_ITERATIONS
    raw = os.environ.get(JOB_ITERATIONS_ENV, "")
    if _INTEGER.fullmatch(raw):
        job_iterations = int(raw)
    return NetpolChurnConfig(job_iterations=job_iterations)