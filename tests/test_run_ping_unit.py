# tests/test_run_ping_unit.py
import json

import pytest

from tools import run_ping


def test_fake_backend_json(capsys):
    """The fake backend runs end to end and prints one JSON report."""
    code = run_ping.main(["demo.test", "--backend", "fake", "-n", "5"])
    out = capsys.readouterr().out

    assert code == 0
    report = json.loads(out)
    assert report["target"] == "demo.test"
    assert report["attempts_total"] == 5
    assert report["statistics"]["average"] == 11.0
    assert report["options_used"]["count"] == 5


def test_multiple_targets_run_concurrently(capsys):
    code = run_ping.main(["a.test", "b.test", "--backend", "fake", "-n", "2", "--announce"])
    out = capsys.readouterr().out

    assert code == 0
    assert "[a.test] Reply from" in out
    assert "[b.test] Reply from" in out
    reports = json.loads(out[out.index("[\n"):])
    assert [r["target"] for r in reports] == ["a.test", "b.test"]
    assert all(r["attempts_total"] == 2 for r in reports)


def test_text_format(capsys):
    run_ping.main(["demo.test", "--backend", "fake", "-n", "3", "--format", "text"])
    out = capsys.readouterr().out
    assert "Ping statistics for demo.test" in out
    assert "sent = 3, received = 3, lost = 0 (100% success)" in out


def test_invalid_count_is_usage_error(capsys):
    with pytest.raises(SystemExit) as excinfo:
        run_ping.main(["demo.test", "--backend", "fake", "-n", "0"])
    assert excinfo.value.code == 2
    assert "count" in capsys.readouterr().err


def test_unresolvable_target_exit_code(monkeypatch, capsys):
    from pingstat.prober.fake import FakeProber

    monkeypatch.setattr(run_ping, "make_prober",
                        lambda args, options: FakeProber(unresolvable={options.target}))
    code = run_ping.main(["no-such-host.invalid"])
    assert code == run_ping.EXIT_UNRESOLVABLE
    assert "no-such-host.invalid" in capsys.readouterr().err


def fake_with_bad_target(monkeypatch):
    from pingstat.prober.fake import FakeProber

    monkeypatch.setattr(run_ping, "make_prober",
                        lambda args, options: FakeProber(default=5, unresolvable={"bad.invalid"}))


def test_unresolvable_target_keeps_other_bounded_reports(monkeypatch, capsys):
    fake_with_bad_target(monkeypatch)
    code = run_ping.main(["good.test", "bad.invalid", "-n", "2"])
    captured = capsys.readouterr()

    assert code == run_ping.EXIT_UNRESOLVABLE
    assert "bad.invalid" in captured.err
    reports = json.loads(captured.out)
    assert [r["target"] for r in reports] == ["good.test"]
    assert reports[0]["attempts_total"] == 2


def test_unresolvable_target_stops_unbounded_runs(monkeypatch, capsys):
    """An unbounded sibling is cancelled instead of running forever."""
    fake_with_bad_target(monkeypatch)
    code = run_ping.main(["good.test", "bad.invalid", "-t", "--wait", "10"])
    captured = capsys.readouterr()

    assert code == run_ping.EXIT_UNRESOLVABLE
    assert "bad.invalid" in captured.err
    reports = json.loads(captured.out[captured.out.index("[\n"):])
    assert [r["target"] for r in reports] == ["good.test"]
    assert reports[0]["options_used"]["count"] is None


def test_unbounded_run_restores_sigint_handler(monkeypatch, capsys):
    import signal

    fake_with_bad_target(monkeypatch)
    before = signal.getsignal(signal.SIGINT)
    run_ping.main(["bad.invalid", "-t"])
    assert signal.getsignal(signal.SIGINT) is before
