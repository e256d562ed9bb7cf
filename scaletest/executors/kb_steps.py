"""Steps that install and run the kube-burner load tool."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tarfile
from dataclasses import dataclass
from pathlib import Path
from urllib.request import urlopen

from scaletest.workflow import Step

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "1.16.0"
BIN_DIR = Path("tools", "bin")
BINARY_PATH = BIN_DIR / "kube-burner"
_BINARY_NAME = "kube-burner"


@dataclass(eq=False)
class KubeBurner(Step):
    """Runs kube-burner with a generated config, from the config's directory."""

    namespace: str = ""
    config_path: str | Path = ""

    def build_args(self) -> list[str]:
        """Return the command-line arguments for a run."""
        return ["init", "--config", os.path.basename(str(self.config_path))]

    def do(self) -> None:
        binary = BINARY_PATH.resolve()
        command = [str(binary), *self.build_args()]
        logger.info("running command: %s", " ".join(command))
        try:
            subprocess.run(command, cwd=Path(self.config_path).parent, check=True)
        except (OSError, subprocess.CalledProcessError) as exc:
            logger.error("failed to run kube-burner: %s", exc)
            raise


@dataclass(eq=False)
class InstallKubeBurnerCLI(Step):
    """Downloads the kube-burner release into tools/bin unless it is already there."""

    version: str = ""

    def download_url(self) -> str:
        """Return the URL of the release tarball for the chosen version."""
        version = self.version or DEFAULT_VERSION
        return (
            "https://github.com/kube-burner/kube-burner/releases/download/"
            f"v{version}/kube-burner-V{version}-linux-x86_64.tar.gz"
        )

    def do(self) -> None:
        if BINARY_PATH.exists():
            logger.info("kube-burner already installed at %s", BINARY_PATH)
            return
        BIN_DIR.mkdir(parents=True, exist_ok=True)
        url = self.download_url()
        tarball = BIN_DIR / "kube-burner.tar.gz"

        logger.info("downloading kube-burner tarball from %s", url)
        with urlopen(url) as response:
            status = getattr(response, "status", 200)
            if status != 200:
                logger.error("failed to download kube-burner: bad status %s", status)
                raise ConnectionError(f"failed to download kube-burner: bad status {status}")
            with tarball.open("wb") as out:
                shutil.copyfileobj(response, out)

        extract_kube_burner_binary(tarball, BINARY_PATH)
        BINARY_PATH.chmod(0o755)
        logger.info("kube-burner installed at %s", BINARY_PATH)

        try:
            tarball.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("failed to remove %s after extraction: %s", tarball, exc)


def extract_kube_burner_binary(tar_path: str | Path, bin_path: str | Path) -> None:
    """Copy the kube-burner executable out of a .tar.gz archive to bin_path."""
    with tarfile.open(tar_path, "r:gz") as archive:
        for member in archive:
            if not member.isreg():
                continue
            if member.name != _BINARY_NAME and os.path.basename(member.name) != _BINARY_NAME:
                continue
            source = archive.extractfile(member)
            if source is None:
                continue
            with source, open(bin_path, "wb") as out:
                shutil.copyfileobj(source, out)
            return
    logger.error("kube-burner binary not found in archive")
    raise FileNotFoundError("kube-burner binary not found in archive")