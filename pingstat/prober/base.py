# pingstat/prober/base.py
from abc import ABC, abstractmethod

from pingstat.schemas import ProbeOutcome


class Prober(ABC):
    """One echo request per call against a target.

    A prober may hold a transport handle across calls; a single instance
    must not be shared between concurrent runs.
    """

    @abstractmethod
    def probe(self, target: str, timeout_ms: int) -> ProbeOutcome:
        """Send exactly one echo request and wait for a reply, an ICMP error or the timeout.

        Ordinary network conditions come back as a failed ProbeOutcome.
        Raises UnresolvableTargetError when target has no address at all.
        """
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
