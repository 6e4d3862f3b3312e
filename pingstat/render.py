# pingstat/render.py
from pingstat.config import RunOptions
from pingstat.schemas import ProbeOutcome, RunReport

_FAILURE_TEXT = {
    "timed_out": "Request timed out",
    "destination_unreachable": "Destination unreachable",
    "ttl_expired": "TTL expired in transit",
    "unknown": "General failure",
}


def announce_line(options: RunOptions, outcome: ProbeOutcome) -> str:
    if outcome.succeeded:
        nbytes = options.payload_size if outcome.bytes_received is None else outcome.bytes_received
        return (f"Reply from {outcome.address}: bytes={nbytes} "
                f"time={outcome.round_trip_ms}ms timeout={options.timeout_ms}ms")
    text = _FAILURE_TEXT[outcome.failure_status.value] if outcome.failure_status else _FAILURE_TEXT["unknown"]
    if outcome.address:
        text = f"Reply from {outcome.address}: {text}"
    return f"{text} (target={options.target}, timeout={options.timeout_ms}ms)"


def _fmt(value, suffix="") -> str:
    return "n/a" if value is None else f"{value}{suffix}"


def report_text(report: RunReport) -> str:
    s = report.statistics
    lines = [f"Ping statistics for {report.target}"]
    if report.resolved_address:
        name = f" ({report.resolved_name})" if report.resolved_name else ""
        lines.append(f"    Responder: {report.resolved_address}{name}")
    lines.append(
        f"    Packets: sent = {report.attempts_total}, received = {report.success_count}, "
        f"lost = {report.failure_count} ({report.success_percent:g}% success)"
    )
    if report.failure_statuses:
        counts = {}
        for status in report.failure_statuses:
            counts[status.value] = counts.get(status.value, 0) + 1
        lines.append("    Failures: " + ", ".join(f"{k}={v}" for k, v in counts.items()))
    lines.append(
        f"    Round trip (ms): min = {_fmt(s.min)}, max = {_fmt(s.max)}, average = {_fmt(s.average)}"
    )
    lines.append(
        f"    Deviation: variance = {_fmt(s.variance)}, "
        f"stddev = {_fmt(s.standard_deviation)} ({_fmt(s.standard_deviation_pct, '%')}), "
        f"mad = {_fmt(s.mean_absolute_deviation)} ({_fmt(s.mean_absolute_deviation_pct, '%')})"
    )
    return "\n".join(lines)
