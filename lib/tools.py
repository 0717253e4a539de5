"""
Execution of external command-line tools (minikube, kind, az).

Flavor checks and provider lookups shell out to the tools that manage the
cluster. Every call honours the OperationContext deadline.
"""

import logging
import re
import shutil
import subprocess
from typing import List, Optional

from lib.constants import LOGGER_NAME, TOOL_DEFAULT_TIMEOUT
from lib.context import OperationContext
from lib.exceptions import OperationTimeoutError, ToolExecutionError

logger = logging.getLogger(LOGGER_NAME)

_VERSION_TOKEN = re.compile(r"\bv?(\d+\.\d+(?:\.\d+)?)")


def extract_version(text: str) -> Optional[str]:
    """Return the first version-looking token in text ("kind v0.20.0 go1.20" -> "0.20.0")."""
    match = _VERSION_TOKEN.search(text or "")
    if not match:
        return None
    return match.group(1)


class ToolRunner:
    """Runs external binaries and returns their standard output."""

    def __init__(self, default_timeout: float = TOOL_DEFAULT_TIMEOUT) -> None:
        self.default_timeout = default_timeout

    def which(self, tool: str) -> Optional[str]:
        return shutil.which(tool)

    def run(self, ctx: OperationContext, args: List[str]) -> str:
        """
        Run a tool and return its stdout.

        Args:
            ctx: Operation context providing cancellation and deadline
            args: Command line, args[0] is the binary name

        Returns:
            Captured standard output

        Raises:
            ToolExecutionError: If the binary is missing or exits non-zero
            OperationCancelledError: If ctx was cancelled or expired
        """
        tool = args[0]
        ctx.check(f"running {tool}")

        path = self.which(tool)
        if not path:
            raise ToolExecutionError(tool, f"{tool} not found in PATH")

        timeout = ctx.remaining(self.default_timeout)
        logger.debug("Running %s (timeout: %ss)", " ".join(args), timeout)
        try:
            result = subprocess.run(
                [path] + list(args[1:]),
                capture_output=True,
                check=False,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise OperationTimeoutError(f"{tool} did not finish within {timeout}s") from exc
        except OSError as exc:
            raise ToolExecutionError(tool, f"failed to execute {tool}: {exc}") from exc

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise ToolExecutionError(tool, f"{tool} exited with status {result.returncode}: {stderr}")

        return result.stdout
