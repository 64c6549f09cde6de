from __future__ import annotations

import subprocess
import time
from typing import Callable

import requests

from nethealth.checks.results import CategoryResult, ProbeResult, Status
from nethealth.checks.tools import GRACE_S, ToolUnavailable, run_tool
from nethealth.models import HttpConfig, Thresholds

HttpProbe = Callable[[str, float], ProbeResult]


def ttfb_requests(url: str, timeout_s: float) -> ProbeResult:
    start = time.perf_counter()
    try:
        # First response only; following redirects would stack round trips and timeouts
        with requests.get(
            url, timeout=(timeout_s, timeout_s), stream=True, allow_redirects=False
        ) as r:
            # Headers are in; pull one body byte so the clock stops at first byte
            next(r.iter_content(chunk_size=1), None)
            latency_ms = int((time.perf_counter() - start) * 1000)
            return ProbeResult(ok=True, latency_ms=latency_ms, detail=f"HTTP {r.status_code}")
    except requests.RequestException as e:
        return ProbeResult(ok=False, error=str(e))


def ttfb_curl(url: str, timeout_s: float) -> ProbeResult:
    argv = [
        "curl",
        "-s",
        "-o",
        "/dev/null",
        "--max-time",
        str(timeout_s),
        "-w",
        "%{http_code} %{time_starttransfer}",
        url,
    ]
    try:
        proc = run_tool(argv, timeout_s=timeout_s + GRACE_S)
    except subprocess.TimeoutExpired:
        return ProbeResult(ok=False, error="timed out")

    if proc.returncode != 0:
        return ProbeResult(ok=False, error=f"curl exited with {proc.returncode}")

    try:
        code, seconds = proc.stdout.split()
        latency_ms = int(float(seconds) * 1000)
    except ValueError:
        return ProbeResult(ok=False, error=f"unexpected curl output: {proc.stdout!r}")
    if latency_ms <= 0:
        return ProbeResult(ok=False, error="no TTFB measured")
    return ProbeResult(ok=True, latency_ms=latency_ms, detail=f"HTTP {code}")


HTTP_CLIENTS: dict[str, HttpProbe] = {
    "requests": ttfb_requests,
    "curl": ttfb_curl,
}


def get_http_probe(name: str) -> HttpProbe:
    try:
        return HTTP_CLIENTS[name]
    except KeyError:
        raise ValueError(
            f"Unknown HTTP client {name!r}, expected one of {', '.join(HTTP_CLIENTS)}"
        ) from None


def classify_latency(result: ProbeResult, thresholds: Thresholds) -> Status:
    if not result.ok or result.latency_ms is None:
        return Status.FAIL
    if result.latency_ms >= thresholds.fail_ms:
        return Status.FAIL
    if result.latency_ms >= thresholds.warn_ms:
        return Status.WARN
    return Status.OK


def _message(url: str, result: ProbeResult) -> str:
    if result.ok and result.latency_ms is not None:
        extra = f", {result.detail}" if result.detail else ""
        return f"{url} TTFB {result.latency_ms} ms{extra}"
    return f"{url} request failed ({result.error or 'no measurement'})"


def check_http_latency(cfg: HttpConfig, probe: HttpProbe = ttfb_requests) -> CategoryResult:
    category = CategoryResult(name="HTTP latency")
    any_reachable = False
    for target in cfg.targets:
        url = str(target)
        try:
            result = probe(url, cfg.timeout_s)
        except ToolUnavailable as exc:
            category.add(Status.WARN, f"{exc}, skipping HTTP checks")
            return category

        status = classify_latency(result, cfg.thresholds)
        if status is not Status.FAIL:
            any_reachable = True
        category.add(status, _message(url, result))

    category.failed = not any_reachable
    return category
