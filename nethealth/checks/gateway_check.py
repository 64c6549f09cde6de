from __future__ import annotations

import logging
import subprocess

from nethealth.checks.ping_check import probe_message, run_ping
from nethealth.checks.results import CategoryResult, Status
from nethealth.checks.tools import ToolUnavailable, run_tool
from nethealth.models import GatewayConfig

logger = logging.getLogger(__name__)

ROUTE_TIMEOUT_S = 5.0


def parse_default_route(output: str) -> tuple[str, str | None] | None:
    """Return (gateway, device) from ``ip route show default`` output."""
    for line in output.splitlines():
        parts = line.split()
        if not parts or parts[0] != "default" or "via" not in parts:
            continue
        idx = parts.index("via")
        if idx + 1 >= len(parts):
            continue
        gateway = parts[idx + 1]
        device = None
        if "dev" in parts:
            dev_idx = parts.index("dev")
            if dev_idx + 1 < len(parts):
                device = parts[dev_idx + 1]
        return gateway, device
    return None


def default_gateway() -> tuple[str, str | None] | None:
    proc = run_tool(["ip", "route", "show", "default"], timeout_s=ROUTE_TIMEOUT_S)
    if proc.returncode != 0:
        logger.warning("ip route exited with %s: %s", proc.returncode, proc.stderr.strip())
        return None
    return parse_default_route(proc.stdout)


def host_addresses() -> list[str]:
    try:
        proc = run_tool(["hostname", "-I"], timeout_s=ROUTE_TIMEOUT_S)
    except (ToolUnavailable, subprocess.TimeoutExpired) as exc:
        logger.debug("Skipping host addresses: %s", exc)
        return []
    if proc.returncode != 0:
        return []
    return proc.stdout.split()


def check_gateway(cfg: GatewayConfig) -> CategoryResult:
    category = CategoryResult(name="Gateway")

    addresses = host_addresses()
    if addresses:
        category.add(Status.INFO, f"Host addresses: {' '.join(addresses)}")

    try:
        route = default_gateway()
    except ToolUnavailable as exc:
        category.add(Status.WARN, f"{exc}, cannot determine default gateway")
        return category
    except subprocess.TimeoutExpired:
        category.fail("Routing table lookup timed out")
        return category

    if route is None:
        category.fail("No default gateway found")
        return category

    gateway, device = route
    if device:
        category.add(Status.INFO, f"Default gateway: {gateway} (dev {device})")
    else:
        category.add(Status.INFO, f"Default gateway: {gateway}")

    try:
        result = run_ping(gateway, cfg.probe.count, cfg.probe.timeout_s)
    except ToolUnavailable as exc:
        category.add(Status.WARN, f"{exc}, cannot probe gateway")
        return category

    if result.ok:
        category.add(Status.OK, f"Gateway {probe_message(gateway, result)}")
    else:
        category.fail(f"Gateway {probe_message(gateway, result)}")
    return category
