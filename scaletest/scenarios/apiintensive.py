"""API-intensive scenario for kube-burner: create, patch and delete many objects."""

from __future__ import annotations

import re
from dataclasses import dataclass

import yaml

from scaletest.templating import Template

DEFAULT_JOB_ITERATIONS = 700

_PLACEHOLDER = re.compile(r"__([A-Za-z][A-Za-z0-9]*)__")
_JOB_SELECTOR = {"kube-burner-job": "api-intensive"}


def _field(name: str) -> str:
    return f"__{name}__"


def _as_template(document: dict) -> str:
    text = yaml.safe_dump(document, sort_keys=False, default_flow_style=False, width=10_000)
    return _PLACEHOLDER.sub(lambda match: "{{ ." + match.group(1) + " }}", text)


def _patch(template: str, patch_type: str) -> dict:
    return {
        "kind": "Deployment",
        "objectTemplate": template,
        "labelSelector": dict(_JOB_SELECTOR),
        "patchType": patch_type,
        "apiVersion": "apps/v1",
    }


def _delete_job(name: str, rate: int, objects: list[dict], wait: bool) -> dict:
    job: dict = {"name": name, "qps": rate, "burst": rate, "jobType": "delete"}
    if wait:
        job["waitForDeletion"] = True
    job["objects"] = objects
    return job


def _selected(kind: str, **extra) -> dict:
    return {"kind": kind, "labelSelector": dict(_JOB_SELECTOR), **extra}


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
        {
            "name": "api-intensive",
            "jobIterations": _field("JobIterations"),
            "qps": 4,
            "burst": 4,
            "namespacedIterations": True,
            "namespace": "api-intensive",
            "podWait": False,
            "cleanup": True,
            "waitWhenFinished": True,
            "objects": [
                {"objectTemplate": f"templates/{name}.yaml", "replicas": 1}
                for name in ("deployment", "configmap", "secret", "service")
            ],
        },
        {
            "name": "api-intensive-patch",
            "jobType": "patch",
            "jobIterations": 10,
            "qps": 2,
            "burst": 2,
            "objects": [
                _patch("templates/deployment_patch_add_label.json", "application/json-patch+json"),
                _patch("templates/deployment_patch_add_pod_2.yaml", "application/apply-patch+yaml"),
                _patch("templates/deployment_patch_add_label.yaml", "application/strategic-merge-patch+json"),
            ],
        },
        _delete_job("api-intensive-remove", 2, [_selected("Deployment", apiVersion="apps/v1")], wait=True),
        _delete_job("ensure-pods-removal", 10, [_selected("Pod")], wait=True),
        _delete_job("remove-services", 2, [_selected("Service")], wait=True),
        _delete_job("remove-configmaps-secrets", 2, [_selected("ConfigMap"), _selected("Secret")], wait=False),
    ],
}

CONFIG_TEMPLATE = _as_template(_DOCUMENT)


@dataclass
class ApiIntensiveConfig(Template):
    """Parameters of the API-intensive scenario."""

    job_iterations: int = DEFAULT_JOB_ITERATIONS

    def get_template(self) -> str:
        return CONFIG_TEMPLATE


def new_api_intensive_config() -> ApiIntensiveConfig:
    """Return the API-intensive scenario with its fixed iteration count."""
    return ApiIntensiveConfig(job_iterations=DEFAULT_JOB_ITERATIONS)