from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path

from nethealth.checks.results import CategoryResult, ProbeResult, Status
from nethealth.checks.tools import GRACE_S, ToolUnavailable, have_tool, run_tool
from nethealth.models import DnsConfig

logger = logging.getLogger(__name__)

# Primary first; the second is only used when the first is missing.
RESOLVER_TOOLS = ("nslookup", "dig")

_NSLOOKUP_ADDR_RE = re.compile(r"^Address(?:es)?:\s*(\S+)\s*$", re.MULTILINE)


def read_nameservers(path: str | Path) -> list[str]:
    """Raises OSError or UnicodeDecodeError when the resolver file cannot be read."""
    servers: list[str] = []
    for line in Path(path).read_text().splitlines():
        parts = line.split()
        if len(parts) >= 2 and parts[0] == "nameserver":
            servers.append(parts[1])
    return servers


def _first_nslookup_answer(output: str) -> str | None:
    # The first Address line belongs to the server that answered.
    _, sep, answer = output.partition("Name:")
    if not sep:
        return None
    match = _NSLOOKUP_ADDR_RE.search(answer)
    return match.group(1) if match else None


def resolve_with(tool: str, domain: str, timeout_s: float) -> ProbeResult:
    if tool == "dig":
        wait = str(max(1, int(timeout_s)))
        argv = ["dig", "+short", f"+time={wait}", "+tries=1", domain]
    else:
        argv = ["nslookup", domain]

    try:
        proc = run_tool(argv, timeout_s=timeout_s + GRACE_S)
    except subprocess.TimeoutExpired:
        return ProbeResult(ok=False, error="timed out")

    if proc.returncode != 0:
        return ProbeResult(ok=False, error=f"{tool} exited with {proc.returncode}")

    if tool == "dig":
        answers = [line.strip() for line in proc.stdout.splitlines() if line.strip()]
        # dig exits 0 on NXDOMAIN; an empty answer section is a failure
        if not answers:
            return ProbeResult(ok=False, error="no answer")
        return ProbeResult(ok=True, detail=answers[-1])

    return ProbeResult(ok=True, detail=_first_nslookup_answer(proc.stdout))


def check_dns(cfg: DnsConfig) -> CategoryResult:
    category = CategoryResult(name="DNS")

    try:
        servers = read_nameservers(cfg.resolv_conf)
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Cannot read %s: %s", cfg.resolv_conf, exc)
        category.add(Status.WARN, f"Cannot read resolvers from {cfg.resolv_conf}")
    else:
        if servers:
            category.add(Status.INFO, f"Resolvers: {', '.join(servers)}")
        else:
            category.add(Status.WARN, f"No nameserver entries in {cfg.resolv_conf}")

    tool = next((t for t in RESOLVER_TOOLS if have_tool(t)), None)
    if tool is None:
        category.add(
            Status.WARN,
            f"Neither {' nor '.join(RESOLVER_TOOLS)} available, skipping lookup",
        )
        return category

    try:
        result = resolve_with(tool, cfg.test_domain, cfg.timeout_s)
    except ToolUnavailable as exc:
        category.add(Status.WARN, f"{exc}, skipping lookup")
        return category

    if result.ok:
        suffix = f" -> {result.detail}" if result.detail else ""
        category.add(Status.OK, f"Resolved {cfg.test_domain} via {tool}{suffix}")
    else:
        category.fail(f"Failed to resolve {cfg.test_domain} via {tool} ({result.error})")
    return category
