import sys
import time

from cgi_scaffold.checks import Operation, check_all, is_available, run_probe
from cgi_scaffold.models import Template

PASS = (sys.executable, "-c", "raise SystemExit(0)")
FAIL = (sys.executable, "-c", "raise SystemExit(3)")
SLEEP = (sys.executable, "-c", "import time; time.sleep(30)")
MISSING = ("definitely-not-a-real-program-cgi-scaffold",)


def test_empty_check_list_is_available():
    assert is_available(Template()) is True


def test_all_probes_pass():
    assert is_available(Template(check=(PASS, PASS))) is True


def test_failing_probe_makes_template_unavailable():
    assert is_available(Template(check=(PASS, FAIL))) is False


def test_missing_program_counts_as_failure():
    assert run_probe(MISSING, Operation()) is False
    assert is_available(Template(check=(MISSING,))) is False


def test_short_circuit_skips_remaining_probes(tmp_path):
    marker = tmp_path / "ran"
    touch = (sys.executable, "-c", f"open({str(marker)!r}, 'w').close()")

    assert is_available(Template(check=(FAIL, MISSING, touch))) is False
    assert not marker.exists()


def test_timeout_terminates_running_probe():
    started = time.monotonic()
    assert is_available(Template(check=(SLEEP, PASS)), Operation(timeout=0.3)) is False
    assert time.monotonic() - started < 10


def test_cancelled_operation_runs_nothing(tmp_path):
    marker = tmp_path / "ran"
    touch = (sys.executable, "-c", f"open({str(marker)!r}, 'w').close()")
    operation = Operation()
    operation.cancel()

    assert operation.cancelled
    assert is_available(Template(check=(touch,)), operation) is False
    assert not marker.exists()


def test_operation_deadline():
    operation = Operation(timeout=60)
    assert not operation.cancelled
    assert 0 < operation.remaining() <= 60
    assert Operation().remaining() is None


def test_check_all_is_independent_per_template():
    templates = {
        "ok": Template(check=(PASS,)),
        "bad": Template(check=(FAIL,)),
        "free": Template(),
    }
    assert check_all(templates, timeout=30) == {"ok": True, "bad": False, "free": True}
    assert check_all({}) == {}
