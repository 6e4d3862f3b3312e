# pingstat/reporter/controller.py

import logging
import socket
import sys
import threading
import time
from typing import Callable, Optional

from pingstat.config import RunOptions, build_options
from pingstat.reporter.rules import should_notify
from pingstat.reporter.state import RunningAggregate, SoundState
from pingstat.reporter.stats import success_percent, summarize
from pingstat.render import announce_line
from pingstat.schemas import COULD_NOT_RESOLVE, RunReport

logger = logging.getLogger(__name__)


def bell() -> None:
    sys.stderr.write("\a")
    sys.stderr.flush()


def wait_or_cancel(seconds: float, cancel: threading.Event) -> None:
    cancel.wait(seconds)


def reverse_lookup(address: str) -> Optional[str]:
    try:
        return socket.gethostbyaddr(address)[0]
    except OSError as e:
        logger.warning("reverse lookup of %s failed: %s", address, e)
        return None


class PingReporter:
    """
    Drives a prober through one run and turns the collected samples into a
    RunReport. Holds no state between runs; the prober is borrowed, not owned.
    """

    def __init__(self,
                 prober,
                 announce: Callable[[str], None] = print,
                 notify: Callable[[], None] = bell,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float, threading.Event], None] = wait_or_cancel,
                 resolver: Callable[[str], Optional[str]] = reverse_lookup):
        self.prober = prober
        self.announce = announce
        self.notify = notify
        self.clock = clock
        self.sleep = sleep
        self.resolver = resolver

    def run(self, options: RunOptions, cancel: Optional[threading.Event] = None) -> RunReport:
        # bounded runs never observe cancellation, so they sleep on a private event
        signal = cancel if (options.unbounded and cancel is not None) else threading.Event()
        agg = RunningAggregate(sound=SoundState(remaining_threshold=options.sound_threshold))

        logger.info("pinging %s (%s, timeout=%dms, wait=%dms)", options.target,
                    "until cancelled" if options.unbounded else f"count={options.count}",
                    options.timeout_ms, options.wait_ms)

        while options.unbounded or agg.attempts < options.count:
            if signal.is_set():
                break

            # -------------------------------
            # 1) Send one probe
            # -------------------------------
            started = self.clock()
            outcome = self.prober.probe(options.target, options.timeout_ms)
            elapsed_ms = (self.clock() - started) * 1000.0

            # -------------------------------
            # 2) Aggregate
            # -------------------------------
            agg.record(outcome)
            logger.debug("attempt %d to %s: %s", agg.attempts, options.target, outcome)

            # -------------------------------
            # 3) Live feedback
            # -------------------------------
            if should_notify(options.sound_policy, agg.sound, outcome.succeeded):
                self.notify()
            if options.announce:
                self.announce(announce_line(options, outcome))

            # -------------------------------
            # 4) Pace, minus the time this attempt already took
            # -------------------------------
            if not options.unbounded and agg.attempts >= options.count:
                break
            if signal.is_set():
                break
            delay_ms = max(0.0, options.wait_ms - elapsed_ms)
            if delay_ms > 0:
                self.sleep(delay_ms / 1000.0, signal)

        report = self._finalize(options, agg)
        logger.info("finished %s: %d/%d replies", options.target, report.success_count, report.attempts_total)
        return report

    def _finalize(self, options: RunOptions, agg: RunningAggregate) -> RunReport:
        resolved_name = None
        if options.resolve_name and agg.last_success_address:
            resolved_name = self.resolver(agg.last_success_address) or COULD_NOT_RESOLVE

        return RunReport(
            target=options.target,
            attempts_total=agg.attempts,
            success_count=agg.success_count,
            failure_count=agg.failure_count,
            success_percent=success_percent(agg.success_count, agg.attempts),
            statistics=summarize(agg.round_trips),
            options_used=options,
            failure_statuses=tuple(agg.failure_statuses),
            resolved_address=agg.last_success_address,
            resolved_name=resolved_name,
        )


def run_ping(target: str, cancel: Optional[threading.Event] = None, privileged: bool = True, **kwargs) -> RunReport:
    """Build options from keyword arguments and run them over an icmplib socket."""
    from pingstat.prober.icmp import IcmpProber

    options = build_options(target, **kwargs)
    with IcmpProber(payload_size=options.payload_size, ttl=options.ttl, privileged=privileged) as prober:
        return PingReporter(prober).run(options, cancel)
