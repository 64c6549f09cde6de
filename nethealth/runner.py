from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from nethealth.checks.dns_check import check_dns
from nethealth.checks.gateway_check import check_gateway
from nethealth.checks.http_check import HttpProbe, check_http_latency, ttfb_requests
from nethealth.checks.ping_check import check_public_ping
from nethealth.checks.results import CategoryResult
from nethealth.formatting import Reporter
from nethealth.models import HealthConfig
from nethealth.ops_logic import count_statuses, exit_code, summarize_categories

logger = logging.getLogger(__name__)

CategoryCheck = tuple[str, Callable[[], CategoryResult]]


class RunPhase(str, Enum):
    NOT_RUN = "not_run"
    RUNNING = "running"
    DONE = "done"


def build_checks(cfg: HealthConfig, http_probe: HttpProbe = ttfb_requests) -> list[CategoryCheck]:
    return [
        ("Gateway", lambda: check_gateway(cfg.gateway)),
        ("DNS", lambda: check_dns(cfg.dns)),
        ("Ping", lambda: check_public_ping(cfg.ping)),
        ("HTTP latency", lambda: check_http_latency(cfg.http, probe=http_probe)),
    ]


def _run_category(name: str, check: Callable[[], CategoryResult]) -> CategoryResult:
    try:
        return check()
    except Exception as exc:
        # An unexpected error in one category must not stop the others.
        logger.exception("%s check crashed", name)
        result = CategoryResult(name=name)
        result.fail(f"{name} check error: {exc}")
        return result


class HealthRun:
    def __init__(self, checks: list[CategoryCheck], reporter: Reporter) -> None:
        self.checks = checks
        self.reporter = reporter
        self.phase = RunPhase.NOT_RUN
        self.results: list[CategoryResult] = []
        self.failure_count = 0
        self.failed: list[str] = []

    def run(self) -> int:
        if self.phase is not RunPhase.NOT_RUN:
            raise RuntimeError(f"Run already {self.phase.value}")
        self.phase = RunPhase.RUNNING

        for idx, (name, check) in enumerate(self.checks):
            if idx:
                self.reporter.blank()
            self.reporter.header(name)
            result = _run_category(name, check)
            for line in result.lines:
                self.reporter.line(line)
            self.results.append(result)
            logger.debug("%s finished, failed=%s", name, result.failed)

        self.phase = RunPhase.DONE
        self.failure_count, self.failed = summarize_categories(self.results)
        logger.info(
            "Run complete: %s",
            ", ".join(f"{s.value}={n}" for s, n in count_statuses(self.results).items()),
        )

        self.reporter.blank()
        self.reporter.summary(self.failed)
        return exit_code(self.failure_count)


def run_once(
    cfg: HealthConfig, reporter: Reporter, http_probe: HttpProbe = ttfb_requests
) -> int:
    return HealthRun(build_checks(cfg, http_probe), reporter).run()
