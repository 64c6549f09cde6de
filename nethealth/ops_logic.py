from __future__ import annotations

from nethealth.checks.results import CategoryResult, Status

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 2


def summarize_categories(results: list[CategoryResult]) -> tuple[int, list[str]]:
    """Failed category count and names; each category counts at most once."""
    failed = [r.name for r in results if r.failed]
    return len(failed), failed


def count_statuses(results: list[CategoryResult]) -> dict[Status, int]:
    counts = {status: 0 for status in Status}
    for r in results:
        for line in r.lines:
            counts[line.status] += 1
    return counts


def exit_code(failure_count: int) -> int:
    return EXIT_OK if failure_count == 0 else EXIT_FAILED
