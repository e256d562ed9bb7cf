"""Introductory step that logs the versions of the tools in use."""

from __future__ import annotations

import logging
import os
import subprocess
import sys

from scaletest.workflow import Step

logger = logging.getLogger(__name__)

_TOOLS = (
    ("kind", os.path.join(".", "tools", "bin", "kind"), "--version"),
    ("kube-burner", os.path.join(".", "tools", "bin", "kube-burner"), "version"),
    ("python", sys.executable, "--version"),
)


class Intro(Step):
    """Logs the start of a run and the version of each tool."""

    def do(self) -> None:
        logger.info("starting workflow")
        for label, binary, arg in _TOOLS:
            try:
                output = run_and_get_stdout(binary, arg)
            except (OSError, subprocess.CalledProcessError) as exc:
                logger.warning("failed to get %s version: %s", label, exc)
                continue
            logger.info("%s version: %s", label, pretty_single_line(output))


def run_and_get_stdout(binary: str, arg: str) -> str:
    """Run binary with one argument and return its standard output."""
    completed = subprocess.run([binary, arg], capture_output=True, text=True, check=True)
    return completed.stdout


def pretty_single_line(text: str) -> str:
    """Trim text and fold newlines and tabs so it fits on one log line."""
    return text.strip().replace("\n", "; ").replace("\t", " ")