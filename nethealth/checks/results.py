from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Status(str, Enum):
    OK = "OK"
    WARN = "WARN"
    FAIL = "FAIL"
    INFO = "INFO"


@dataclass
class ProbeResult:
    ok: bool
    latency_ms: int | None = None
    detail: str | None = None
    error: str | None = None


@dataclass
class StatusLine:
    status: Status
    message: str


@dataclass
class CategoryResult:
    name: str
    failed: bool = False
    lines: list[StatusLine] = field(default_factory=list)

    def add(self, status: Status, message: str) -> None:
        self.lines.append(StatusLine(status, message))

    def fail(self, message: str) -> None:
        self.add(Status.FAIL, message)
        self.failed = True
