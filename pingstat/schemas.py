# pingstat/schemas.py
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Optional

from pingstat.config import RunOptions

COULD_NOT_RESOLVE = "could not resolve"


class FailureStatus(str, Enum):
    TIMED_OUT = "timed_out"
    DESTINATION_UNREACHABLE = "destination_unreachable"
    TTL_EXPIRED = "ttl_expired"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of a single echo request.

    round_trip_ms and address are only meaningful when succeeded is True,
    failure_status only when it is False.
    """
    succeeded: bool
    round_trip_ms: Optional[int] = None
    address: Optional[str] = None
    failure_status: Optional[FailureStatus] = None
    bytes_received: Optional[int] = None

    @classmethod
    def success(cls, address: str, round_trip_ms: int, bytes_received: Optional[int] = None) -> "ProbeOutcome":
        return cls(True, round_trip_ms=round_trip_ms, address=address, bytes_received=bytes_received)

    @classmethod
    def failure(cls, status: FailureStatus, address: Optional[str] = None) -> "ProbeOutcome":
        # address here is whoever sent the ICMP error, if anyone did
        return cls(False, address=address, failure_status=status)

    def to_dict(self) -> dict:
        d = asdict(self)
        if self.failure_status is not None:
            d["failure_status"] = self.failure_status.value
        return d


@dataclass(frozen=True)
class StatisticsSummary:
    # None means "not applicable": there were no successful round trips
    average: Optional[float] = None
    min: Optional[int] = None
    max: Optional[int] = None
    variance: Optional[float] = None
    standard_deviation: Optional[float] = None
    standard_deviation_pct: Optional[float] = None
    mean_absolute_deviation: Optional[float] = None
    mean_absolute_deviation_pct: Optional[float] = None

    @property
    def applicable(self) -> bool:
        return self.average is not None


@dataclass(frozen=True)
class RunReport:
    target: str
    attempts_total: int
    success_count: int
    failure_count: int
    success_percent: float
    statistics: StatisticsSummary
    options_used: RunOptions
    failure_statuses: tuple[FailureStatus, ...] = field(default_factory=tuple)
    resolved_address: Optional[str] = None
    resolved_name: Optional[str] = None

    def to_dict(self) -> dict:
        d = asdict(self)
        d["failure_statuses"] = [s.value for s in self.failure_statuses]
        d["options_used"] = self.options_used.to_dict()
        return d
