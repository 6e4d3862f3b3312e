# pingstat/reporter/state.py
from dataclasses import dataclass, field
from typing import Optional

from pingstat.schemas import FailureStatus, ProbeOutcome


@dataclass
class SoundState:
    has_succeeded_once: bool = False
    has_failed_once: bool = False
    remaining_threshold: int = 0   # negative = unlimited


@dataclass
class RunningAggregate:
    success_count: int = 0
    failure_count: int = 0
    # both sequences are append-only, in attempt order
    round_trips: list[int] = field(default_factory=list)
    failure_statuses: list[FailureStatus] = field(default_factory=list)
    last_success_address: Optional[str] = None
    sound: SoundState = field(default_factory=SoundState)

    @property
    def attempts(self) -> int:
        return self.success_count + self.failure_count

    def record(self, outcome: ProbeOutcome) -> None:
        if outcome.succeeded:
            self.success_count += 1
            self.round_trips.append(outcome.round_trip_ms)
            self.last_success_address = outcome.address
        else:
            self.failure_count += 1
            self.failure_statuses.append(outcome.failure_status or FailureStatus.UNKNOWN)
