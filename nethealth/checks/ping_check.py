from __future__ import annotations

import math
import re
import subprocess
import time

from nethealth.checks.results import CategoryResult, ProbeResult, Status
from nethealth.checks.tools import GRACE_S, ToolUnavailable, run_tool
from nethealth.models import PingConfig, ProbeSettings

_RTT_AVG_RE = re.compile(r"=\s*[\d.]+/([\d.]+)/")


def run_ping(target: str, count: int, timeout_s: float) -> ProbeResult:
    """
    Ping ``target`` ``count`` times. Pass/fail is ping's own exit status;
    partial loss that ping still reports as success counts as success.
    Raises ToolUnavailable when ping is missing.
    """
    wait = str(max(1, math.ceil(timeout_s)))
    argv = ["ping", "-c", str(count), "-W", wait, target]
    start = time.perf_counter()
    try:
        proc = run_tool(argv, timeout_s=count * timeout_s + GRACE_S)
    except subprocess.TimeoutExpired:
        latency_ms = int((time.perf_counter() - start) * 1000)
        return ProbeResult(ok=False, latency_ms=latency_ms, error="timed out")

    if proc.returncode != 0:
        return ProbeResult(ok=False, error=f"ping exited with {proc.returncode}")

    match = _RTT_AVG_RE.search(proc.stdout)
    latency_ms = int(float(match.group(1))) if match else None
    return ProbeResult(ok=True, latency_ms=latency_ms)


def _describe(result: ProbeResult) -> str:
    if result.ok:
        if result.latency_ms is None:
            return "reachable"
        return f"reachable (avg {result.latency_ms} ms)"
    return f"unreachable ({result.error})"


def probe_message(target: str, result: ProbeResult) -> str:
    return f"{target} {_describe(result)}"


def check_public_ping(cfg: PingConfig) -> CategoryResult:
    category = CategoryResult(name="Ping")
    probe: ProbeSettings = cfg.probe
    any_ok = False

    for target in cfg.targets:
        try:
            result = run_ping(target, probe.count, probe.timeout_s)
        except ToolUnavailable as exc:
            category.add(Status.WARN, f"{exc}, skipping ping checks")
            return category

        if result.ok:
            any_ok = True
            category.add(Status.OK, probe_message(target, result))
        else:
            category.add(Status.FAIL, probe_message(target, result))

    # One blocked address must not flag the whole host as offline.
    category.failed = not any_ok
    return category
