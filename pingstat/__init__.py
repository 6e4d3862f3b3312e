from pingstat.config import RunOptions, SoundPolicy, build_options
from pingstat.errors import InvalidOptionsError, PingStatError, UnresolvableTargetError
from pingstat.reporter.controller import PingReporter, run_ping
from pingstat.schemas import FailureStatus, ProbeOutcome, RunReport, StatisticsSummary

__all__ = [
    "FailureStatus",
    "InvalidOptionsError",
    "PingReporter",
    "PingStatError",
    "ProbeOutcome",
    "RunOptions",
    "RunReport",
    "SoundPolicy",
    "StatisticsSummary",
    "UnresolvableTargetError",
    "build_options",
    "run_ping",
]
