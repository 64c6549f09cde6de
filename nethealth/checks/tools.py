from __future__ import annotations

import logging
import shutil
import subprocess

logger = logging.getLogger(__name__)

# Extra seconds allowed on top of a tool's own timeout before we kill it.
GRACE_S = 2.0


class ToolUnavailable(RuntimeError):
    def __init__(self, tool: str) -> None:
        super().__init__(f"{tool} not available")
        self.tool = tool


def have_tool(tool: str) -> bool:
    return shutil.which(tool) is not None


def run_tool(argv: list[str], timeout_s: float) -> subprocess.CompletedProcess:
    """
    Run an external utility to completion and capture its output.

    Raises ToolUnavailable if the executable is not on PATH. A tool that
    overruns ``timeout_s`` raises subprocess.TimeoutExpired for the caller
    to treat as a failed probe.
    """
    exe = shutil.which(argv[0])
    if exe is None:
        raise ToolUnavailable(argv[0])

    logger.debug("Running %s (timeout %.1fs)", " ".join(argv), timeout_s)
    proc = subprocess.run(
        [exe, *argv[1:]],
        capture_output=True,
        text=True,
        check=False,
        timeout=timeout_s,
    )
    logger.debug("%s exited with %s", argv[0], proc.returncode)
    return proc
