"""Retry an operation a bounded number of times."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass
class Retrier:
    """Attempts an operation several times, sleeping between failures."""

    attempts: int
    delay: float
    exp_backoff: bool = False

    def do(self, func: Callable[[], Any], timeout: float | None = None) -> Any:
        """Call func until it succeeds or attempts run out.

        Returns func's result, re-raises its last exception, or raises
        TimeoutError when the attempts do not finish within timeout seconds.
        """
        outcome: dict[str, Any] = {"result": None, "error": None}
        done = threading.Event()

        def run() -> None:
            delay = self.delay
            try:
                for _ in range(self.attempts):
                    try:
                        outcome["result"] = func()
                        outcome["error"] = None
                        break
                    except Exception as exc:
                        outcome["error"] = exc
                    time.sleep(delay)
                    if self.exp_backoff:
                        delay *= 2
            finally:
                done.set()

        threading.Thread(target=run, daemon=True).start()
        if not done.wait(timeout):
            raise TimeoutError(f"context error: attempts did not finish within {timeout}s")
        if outcome["error"] is not None:
            raise outcome["error"]
        return outcome["result"]