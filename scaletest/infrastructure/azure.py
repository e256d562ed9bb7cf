"""Fetch the kubeconfig of an existing AKS cluster."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from scaletest.executors.cl2_steps import DEFAULT_KUBECONFIG
from scaletest.workflow import Step, Workflow, pipe

logger = logging.getLogger(__name__)

KUBE_CONFIG_PERMS = 0o600


@dataclass(eq=False)
class GetKubeConfig(Step):
    """Writes the user kubeconfig of an AKS cluster, using the Azure CLI login."""

    cluster_name: str = ""
    resource_group_name: str = ""
    subscription_id: str = ""
    kubeconfig_path: str | Path = DEFAULT_KUBECONFIG

    def _command(self) -> list[str]:
        command = [
            shutil.which("az") or "az", "aks", "get-credentials",
            "--resource-group", self.resource_group_name,
            "--name", self.cluster_name,
            "--file", "-",
        ]
        if self.subscription_id:
            command += ["--subscription", self.subscription_id]
        return command

    def do(self) -> None:
        try:
            result = subprocess.run(self._command(), capture_output=True, text=True)
        except OSError as exc:
            raise RuntimeError(f"failed to obtain a credential: {exc}") from exc
        if result.returncode != 0:
            raise RuntimeError(
                f"failed to finish the get managed cluster client request: {result.stderr.strip()}"
            )
        if not result.stdout.strip():
            raise RuntimeError("failed to finish the get managed cluster client request: no kubeconfig returned")

        path = self.kubeconfig_path
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, KUBE_CONFIG_PERMS)
            with os.fdopen(fd, "w", encoding="utf-8") as out:
                out.write(result.stdout)
        except OSError as exc:
            raise RuntimeError(f'failed to write kubeconfig to file "{path}": {exc}') from exc

        logger.info(
            'kubeconfig for cluster "%s" in resource group "%s" written to "%s"',
            self.cluster_name,
            self.resource_group_name,
            path,
        )


def get_existing_azure_cluster() -> Workflow:
    """Return a workflow that fetches the kubeconfig of an existing AKS cluster."""
    return Workflow().add(pipe(GetKubeConfig()))