from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TextIO

from nethealth.checks.results import Status, StatusLine

LABELS = {
    Status.OK: "[ OK ]",
    Status.WARN: "[WARN]",
    Status.FAIL: "[FAIL]",
    Status.INFO: "[INFO]",
}


@dataclass(frozen=True)
class Palette:
    green: str = ""
    yellow: str = ""
    red: str = ""
    cyan: str = ""
    bold: str = ""
    reset: str = ""

    def for_status(self, status: Status) -> str:
        return {
            Status.OK: self.green,
            Status.WARN: self.yellow,
            Status.FAIL: self.red,
            Status.INFO: self.cyan,
        }[status]


PLAIN = Palette()
ANSI = Palette(
    green="\033[32m",
    yellow="\033[33m",
    red="\033[31m",
    cyan="\033[36m",
    bold="\033[1m",
    reset="\033[0m",
)


def color_enabled(mode: str, stream: TextIO) -> bool:
    if mode == "always":
        return True
    if mode == "never":
        return False
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM", "") in {"dumb", "unknown"}:
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def palette_for(mode: str, stream: TextIO) -> Palette:
    return ANSI if color_enabled(mode, stream) else PLAIN


def format_status(status: Status, message: str, palette: Palette = PLAIN) -> str:
    color = palette.for_status(status)
    return f"{color}{LABELS[status]}{palette.reset} {message}"


def format_header(title: str, palette: Palette = PLAIN) -> str:
    return f"{palette.bold}==== {title} ===={palette.reset}"


def format_summary(failed: list[str], palette: Palette = PLAIN) -> str:
    if not failed:
        return format_status(Status.OK, "All checks passed", palette)
    noun = "check" if len(failed) == 1 else "checks"
    return format_status(
        Status.FAIL, f"{len(failed)} {noun} failed: {', '.join(failed)}", palette
    )


class Reporter:
    def __init__(self, stream: TextIO, palette: Palette = PLAIN) -> None:
        self.stream = stream
        self.palette = palette

    def _write(self, text: str) -> None:
        self.stream.write(text + "\n")
        self.stream.flush()

    def header(self, title: str) -> None:
        self._write(format_header(title, self.palette))

    def line(self, line: StatusLine) -> None:
        self._write(format_status(line.status, line.message, self.palette))

    def blank(self) -> None:
        self._write("")

    def summary(self, failed: list[str]) -> None:
        self.header("Summary")
        self._write(format_summary(failed, self.palette))
