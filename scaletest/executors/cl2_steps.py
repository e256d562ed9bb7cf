"""Steps that build and run the clusterloader2 load tool."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from scaletest.workflow import Step

logger = logging.getLogger(__name__)

DEFAULT_KUBECONFIG = os.path.expanduser(os.path.join("~", ".kube", "config"))
PODMONITOR_DIRECTORY = str(Path(__file__).resolve().parents[1] / "infrastructure" / "podmonitors")

BIN_DIR = Path("tools", "bin")
BINARY_PATH = BIN_DIR / "clusterloader2"
SRC_DIR = Path("tools", "src")
REPO_DIR = SRC_DIR / "perf-tests"
BUILD_DIR = REPO_DIR / "clusterloader2"
PERF_TESTS_REPO = "https://github.com/kubernetes/perf-tests.git"

SERVICE_MONITOR_RESOURCE = "servicemonitors.monitoring.coreos.com"
MONITORING_NAMESPACE = "monitoring"
_MISSING_RESOURCE_MARKERS = (
    "could not find the requested resource",
    "the server doesn't have a resource type",
)
_POLL_INTERVAL = 1.0
_MAX_BACKOFF = 30.0


def _delete_master_service_monitor(kubeconfig: str, stop: threading.Event) -> None:
    """Delete the 'master' ServiceMonitor whenever it shows up, until stop is set.

    clusterloader2 creates it on every run, but its targets do not exist on kind
    clusters, so its presence keeps the test from ever becoming ready.
    """
    kubectl = shutil.which("kubectl")
    if kubectl is None:
        logger.warning("kubectl not found; the 'master' ServiceMonitor will not be removed")
        return
    base = [kubectl]
    if kubeconfig:
        base += ["--kubeconfig", kubeconfig]
    base += ["--namespace", MONITORING_NAMESPACE]

    logger.info("watching for ServiceMonitor 'master' to delete it")
    backoff = 1.0
    while not stop.is_set():
        listing = subprocess.run(
            [*base, "get", SERVICE_MONITOR_RESOURCE, "--output", "name"],
            capture_output=True,
            text=True,
        )
        if listing.returncode != 0:
            if any(marker in listing.stderr for marker in _MISSING_RESOURCE_MARKERS):
                logger.warning("ServiceMonitor resource not found, retrying: %s", listing.stderr.strip())
                stop.wait(backoff)
                backoff = min(backoff * 2, _MAX_BACKOFF)
                continue
            logger.error("failed to watch ServiceMonitors: %s", listing.stderr.strip())
            return
        names = {entry.rpartition("/")[2] for entry in listing.stdout.split()}
        if "master" in names:
            logger.info("deleting ServiceMonitor 'master', clusterloader2 creates it and it is not relevant")
            deletion = subprocess.run(
                [*base, "delete", SERVICE_MONITOR_RESOURCE, "master", "--ignore-not-found"],
                capture_output=True,
                text=True,
            )
            if deletion.returncode != 0:
                logger.error("failed to delete ServiceMonitor 'master': %s", deletion.stderr.strip())
        stop.wait(_POLL_INTERVAL)


@dataclass(eq=False)
class ClusterLoader2(Step):
    """Runs clusterloader2 against a generated test config."""

    config_path: str | Path = ""
    kubeconfig: str = ""
    provider: str = ""

    def build_args(self, output_dir: str | Path) -> list[str]:
        """Return the command-line arguments for a run reporting into output_dir."""
        return [
            "--v=2",
            "--kubeconfig", self.kubeconfig,
            "--testconfig", str(self.config_path),
            "--provider", self.provider,
            "--report-dir", str(output_dir),
            "--apiserver-pprof-by-client-enabled", "false",
            "--enable-prometheus-server",
            "--prometheus-storage-class-provisioner", "standard",
            "--prometheus-pvc-storage-class", "standard",
            "--prometheus-storage-class-volume-type", "standard",
            "--prometheus-additional-monitors-path", PODMONITOR_DIRECTORY,
            "--prometheus-scrape-master-kubelets=false",
            "--prometheus-scrape-kubelets=false",
            "--prometheus-scrape-metrics-server=false",
            "--prometheus-scrape-kube-state-metrics=false",
            "--prometheus-scrape-kubelets=false",
            "--prometheus-scrape-kube-proxy=false",
        ]

    def do(self) -> None:
        binary = BINARY_PATH.resolve()
        config_dir = Path(self.config_path).parent
        output_dir = config_dir / "output"
        output_dir.mkdir(parents=True, exist_ok=True)

        command = [str(binary), *self.build_args(output_dir)]
        stop = threading.Event()
        watcher = threading.Thread(
            target=_delete_master_service_monitor, args=(self.kubeconfig, stop), daemon=True
        )
        watcher.start()
        logger.info("running command: %s", " ".join(command))
        try:
            subprocess.run(command, cwd=config_dir, check=True)
        except (OSError, subprocess.CalledProcessError) as exc:
            logger.error("failed to run clusterloader2: %s", exc)
            raise
        finally:
            stop.set()
            watcher.join()


@dataclass(eq=False)
class InstallClusterLoader2CLI(Step):
    """Builds clusterloader2 from source into tools/bin unless it is already there."""

    version: str = ""

    def do(self) -> None:
        if BINARY_PATH.exists():
            logger.info("clusterloader2 already installed at %s", BINARY_PATH)
            return
        BIN_DIR.mkdir(parents=True, exist_ok=True)
        SRC_DIR.mkdir(parents=True, exist_ok=True)
        if REPO_DIR.exists():
            logger.info("perf-tests repo already cloned in %s", REPO_DIR)
        else:
            logger.info("cloning perf-tests repo for clusterloader2 build into %s", REPO_DIR)
            run_cmd(["git", "clone", "--depth=1", PERF_TESTS_REPO, str(REPO_DIR)])
        run_cmd(["go", "mod", "tidy"], BUILD_DIR)
        run_cmd(["go", "build", "-o", "clusterloader2", "cmd/clusterloader.go"], BUILD_DIR)
        (BUILD_DIR / "clusterloader2").replace(BINARY_PATH)
        BINARY_PATH.chmod(0o755)
        logger.info("clusterloader2 installed at %s", BINARY_PATH)


def run_cmd(cmd: Sequence[str], cwd: str | Path | None = None) -> None:
    """Run a command, optionally in cwd, raising if it fails."""
    args = list(cmd)
    if not args:
        raise ValueError("no command provided")
    logger.info("executing command %s in %s", args, cwd or ".")
    subprocess.run(args, cwd=cwd or None, check=True)