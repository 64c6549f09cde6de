import io
import itertools
import unittest
from unittest.mock import patch

from nethealth.checks.results import CategoryResult, Status
from nethealth.formatting import Reporter
from nethealth.models import HealthConfig
from nethealth.runner import HealthRun, RunPhase, run_once


def _category(name: str, failed: bool) -> CategoryResult:
    result = CategoryResult(name=name)
    if failed:
        result.fail(f"{name} broken")
    else:
        result.add(Status.OK, f"{name} fine")
    return result


def _checks(outcomes: dict[str, bool], calls: list[str] | None = None):
    def make(name, failed):
        def check():
            if calls is not None:
                calls.append(name)
            return _category(name, failed)

        return check

    return [(name, make(name, failed)) for name, failed in outcomes.items()]


class HealthRunTests(unittest.TestCase):
    def test_all_passing_exits_zero(self) -> None:
        out = io.StringIO()
        run = HealthRun(
            _checks({"Gateway": False, "DNS": False, "Ping": False, "HTTP latency": False}),
            Reporter(out),
        )

        self.assertEqual(run.run(), 0)
        self.assertEqual(run.failure_count, 0)
        self.assertIn("[ OK ] All checks passed", out.getvalue())

    def test_gateway_failure_does_not_stop_other_checks(self) -> None:
        calls: list[str] = []
        out = io.StringIO()
        run = HealthRun(
            _checks(
                {"Gateway": True, "DNS": False, "Ping": False, "HTTP latency": False}, calls
            ),
            Reporter(out),
        )

        self.assertEqual(run.run(), 1)
        self.assertEqual(calls, ["Gateway", "DNS", "Ping", "HTTP latency"])
        self.assertIn("[FAIL] 1 check failed: Gateway", out.getvalue())

    def test_failure_count_is_per_category(self) -> None:
        ping = CategoryResult(name="Ping")
        ping.fail("1.1.1.1 unreachable")
        ping.fail("8.8.8.8 unreachable")
        run = HealthRun([("Ping", lambda: ping)], Reporter(io.StringIO()))

        run.run()

        self.assertEqual(run.failure_count, 1)

    def test_crashing_check_counts_as_failed_and_run_continues(self) -> None:
        calls: list[str] = []

        def boom():
            raise RuntimeError("unexpected")

        checks = [("DNS", boom)] + _checks({"Ping": False}, calls)
        out = io.StringIO()
        with self.assertLogs("nethealth.runner", level="ERROR"):
            code = HealthRun(checks, Reporter(out)).run()

        self.assertEqual(code, 1)
        self.assertEqual(calls, ["Ping"])
        self.assertIn("DNS check error: unexpected", out.getvalue())

    def test_failure_count_is_order_independent(self) -> None:
        outcomes = {"Gateway": True, "DNS": False, "Ping": True, "HTTP latency": False}
        counts = set()
        for order in itertools.permutations(outcomes):
            run = HealthRun(
                _checks({name: outcomes[name] for name in order}), Reporter(io.StringIO())
            )
            run.run()
            counts.add(run.failure_count)

        self.assertEqual(counts, {2})

    def test_phases(self) -> None:
        run = HealthRun(_checks({"DNS": False}), Reporter(io.StringIO()))
        self.assertIs(run.phase, RunPhase.NOT_RUN)

        run.run()

        self.assertIs(run.phase, RunPhase.DONE)
        with self.assertRaises(RuntimeError):
            run.run()

    def test_output_sections_in_order(self) -> None:
        out = io.StringIO()
        HealthRun(
            _checks({"Gateway": False, "DNS": True}), Reporter(out)
        ).run()

        self.assertEqual(
            out.getvalue().splitlines(),
            [
                "==== Gateway ====",
                "[ OK ] Gateway fine",
                "",
                "==== DNS ====",
                "[FAIL] DNS broken",
                "",
                "==== Summary ====",
                "[FAIL] 1 check failed: DNS",
            ],
        )


class RunOnceTests(unittest.TestCase):
    def test_runs_the_four_categories_in_fixed_order(self) -> None:
        calls: list[str] = []

        def fake(name):
            def check(*args, **kwargs):
                calls.append(name)
                return _category(name, failed=False)

            return check

        with patch("nethealth.runner.check_gateway", side_effect=fake("Gateway")), patch(
            "nethealth.runner.check_dns", side_effect=fake("DNS")
        ), patch("nethealth.runner.check_public_ping", side_effect=fake("Ping")), patch(
            "nethealth.runner.check_http_latency", side_effect=fake("HTTP latency")
        ):
            code = run_once(HealthConfig(), Reporter(io.StringIO()))

        self.assertEqual(code, 0)
        self.assertEqual(calls, ["Gateway", "DNS", "Ping", "HTTP latency"])


if __name__ == "__main__":
    unittest.main()
