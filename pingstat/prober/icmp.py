# pingstat/prober/icmp.py
import logging
from typing import Optional

from icmplib import (
    DestinationUnreachable,
    ICMPError,
    ICMPRequest,
    ICMPSocketError,
    ICMPv4Socket,
    ICMPv6Socket,
    NameLookupError,
    TimeExceeded,
    TimeoutExceeded,
)
from icmplib.utils import is_ipv6_address, resolve, unique_identifier

from pingstat.config import DEFAULT_PAYLOAD_SIZE, DEFAULT_TTL
from pingstat.errors import UnresolvableTargetError
from pingstat.prober.base import Prober
from pingstat.schemas import FailureStatus, ProbeOutcome

logger = logging.getLogger(__name__)


class IcmpProber(Prober):
    """
    Sends ICMP echo requests through icmplib sockets. The socket for each
    address family is opened on first use and reused until close(); resolved
    addresses are cached per target.
    """

    def __init__(self,
                 payload_size: int = DEFAULT_PAYLOAD_SIZE,
                 ttl: int = DEFAULT_TTL,
                 privileged: bool = True):
        self.payload_size = payload_size
        self.ttl = ttl
        self.privileged = privileged
        self.identifier = unique_identifier()
        self._sequence = 0
        self._sockets = {}
        self._addresses = {}

    def _resolve(self, target: str) -> str:
        address = self._addresses.get(target)
        if address is None:
            try:
                address = resolve(target)[0]
            except NameLookupError as e:
                logger.warning("unresolvable target %s: %s", target, e)
                raise UnresolvableTargetError(target, str(e)) from e
            self._addresses[target] = address
        return address

    def _socket(self, address: str):
        family = 6 if is_ipv6_address(address) else 4
        sock = self._sockets.get(family)
        if sock is None:
            cls = ICMPv6Socket if family == 6 else ICMPv4Socket
            sock = cls(privileged=self.privileged)
            self._sockets[family] = sock
        return sock

    def _next_sequence(self) -> int:
        self._sequence = (self._sequence + 1) & 0xFFFF
        return self._sequence

    def probe(self, target: str, timeout_ms: int) -> ProbeOutcome:
        address = self._resolve(target)
        sock = self._socket(address)

        request = ICMPRequest(
            destination=address,
            id=self.identifier,
            sequence=self._next_sequence(),
            payload_size=self.payload_size,
            ttl=self.ttl,
        )

        try:
            sock.send(request)
            reply = sock.receive(request, timeout_ms / 1000.0)
            reply.raise_for_status()
        except TimeoutExceeded:
            return ProbeOutcome.failure(FailureStatus.TIMED_OUT)
        except DestinationUnreachable as e:
            return ProbeOutcome.failure(FailureStatus.DESTINATION_UNREACHABLE, _source(e))
        except TimeExceeded as e:
            return ProbeOutcome.failure(FailureStatus.TTL_EXPIRED, _source(e))
        except (ICMPError, ICMPSocketError) as e:
            logger.debug("probe to %s failed: %s", address, e)
            return ProbeOutcome.failure(FailureStatus.UNKNOWN, _source(e))

        rtt_ms = int((reply.time - request.time) * 1000)
        return ProbeOutcome.success(reply.source, max(0, rtt_ms), reply.bytes_received)

    def close(self) -> None:
        for sock in self._sockets.values():
            sock.close()
        self._sockets.clear()


def _source(error: Exception) -> Optional[str]:
    reply = getattr(error, "reply", None)
    return getattr(reply, "source", None)
