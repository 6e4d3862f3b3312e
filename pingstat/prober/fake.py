# pingstat/prober/fake.py
from collections import deque

from pingstat.errors import UnresolvableTargetError
from pingstat.prober.base import Prober
from pingstat.schemas import FailureStatus, ProbeOutcome


class FakeProber(Prober):
    """
    script: iterable of ProbeOutcome to return, one per call, in order.
    Integers are shorthand for a success with that round trip, a FailureStatus
    for a failure with that status. When the script runs out, `default` is
    returned (a timeout unless given). Targets listed in `unresolvable`
    raise UnresolvableTargetError.
    """
    def __init__(self, script=None, default=None, address="192.0.2.1", unresolvable=()):
        self.address = address
        self.script = deque(self._coerce(item) for item in (script or ()))
        self.default = self._coerce(default) if default is not None else ProbeOutcome.failure(FailureStatus.TIMED_OUT)
        self.unresolvable = set(unresolvable)
        self.calls = []
        self.closed = False

    def _coerce(self, item) -> ProbeOutcome:
        if isinstance(item, ProbeOutcome):
            return item
        if isinstance(item, FailureStatus):
            return ProbeOutcome.failure(item)
        return ProbeOutcome.success(self.address, int(item))

    def probe(self, target: str, timeout_ms: int) -> ProbeOutcome:
        self.calls.append((target, timeout_ms))
        if target in self.unresolvable:
            raise UnresolvableTargetError(target, "Name or service not known")
        if self.script:
            return self.script.popleft()
        return self.default

    def close(self) -> None:
        self.closed = True
