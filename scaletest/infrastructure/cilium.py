"""Install or upgrade Cilium with Helm."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from typing import Any

import yaml

from scaletest.workflow import Step, Workflow, pipe

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "kube-system"
RELEASE_NAME = "cilium"
CHART_NAME = "cilium"
REPO_URL = "https://helm.cilium.io/"
HELM_TIMEOUT = "5m0s"


def cilium_values() -> dict[str, Any]:
    """Return the chart values: Kubernetes IPAM, Hubble, and Prometheus metrics."""
    return {
        "ipam": {"mode": "kubernetes"},
        "hubble": {
            "enabled": True,
            "relay": {"enabled": True},
            "ui": {"enabled": True},
            "metrics": {
                "enabled": ["dns", "drop", "tcp", "flow", "port-distribution", "icmp", "http"],
            },
        },
        "operator": {"enabled": True, "metrics": {"enabled": True}},
        "metrics": {"enabled": True, "serviceMonitor": {"enabled": True}},
        "prometheus": {"enabled": True, "port": 9962},
    }


def _helm() -> str:
    return shutil.which("helm") or "helm"


def _run(args: list[str]) -> subprocess.CompletedProcess:
    return subprocess.run(args, capture_output=True, text=True)


@dataclass(eq=False)
class InstallCiliumStep(Step):
    """Installs Cilium, or upgrades the release when it is already present."""

    namespace: str = ""

    def do(self) -> None:
        namespace = self.namespace or DEFAULT_NAMESPACE
        helm = _helm()

        history = _run([helm, "history", RELEASE_NAME, "--namespace", namespace, "--max", "1"])
        action = "install" if history.returncode != 0 else "upgrade"

        with tempfile.NamedTemporaryFile(
            "w", prefix="cilium-values-", suffix=".yaml", delete=False, encoding="utf-8"
        ) as values_file:
            yaml.safe_dump(cilium_values(), values_file, sort_keys=False)
            values_path = values_file.name
        try:
            if action == "upgrade":
                logger.info("preparing upgrade for release %s", RELEASE_NAME)
            result = _run([
                helm, action, RELEASE_NAME, CHART_NAME,
                "--repo", REPO_URL,
                "--namespace", namespace,
                "--wait",
                "--timeout", HELM_TIMEOUT,
                "--values", values_path,
            ])
        finally:
            os.remove(values_path)

        if result.returncode != 0:
            message = result.stderr.strip() or result.stdout.strip()
            logger.error("failed to %s Cilium: %s", action, message)
            raise RuntimeError(f"failed to {action} Cilium: {message}")
        logger.info("%s of Cilium release %s done", action, RELEASE_NAME)
        logger.info("Cilium is ready")


def run_install_cilium() -> Workflow:
    """Return a workflow that installs Cilium."""
    return Workflow().add(pipe(InstallCiliumStep()))