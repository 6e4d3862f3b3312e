# pingstat/prober/system.py
import logging
import math
import re
import shutil
import subprocess
import sys

from pingstat.config import DEFAULT_PAYLOAD_SIZE, DEFAULT_TTL
from pingstat.errors import UnresolvableTargetError
from pingstat.prober.base import Prober
from pingstat.schemas import FailureStatus, ProbeOutcome

logger = logging.getLogger(__name__)

DEFAULT_PING_BIN = shutil.which("ping") or "/bin/ping"

# Linux: "64 bytes from 8.8.8.8: icmp_seq=1 ttl=117 time=12.3 ms"
# macOS: "64 bytes from 8.8.8.8: icmp_seq=0 ttl=117 time=12.345 ms"
# Windows: "Reply from 8.8.8.8: bytes=32 time=12ms TTL=117"
_REPLY_RE = re.compile(
    r"(?:(?P<bytes>\d+) bytes from|Reply from) (?P<addr>[0-9A-Fa-f.:]+?)(?: \(.*?\))?: .*?"
    r"(?:bytes=(?P<wbytes>\d+) )?time(?P<op>[=<])(?P<rtt>[\d.]+) ?ms",
    re.I,
)
_FROM_RE = re.compile(r"from (?P<addr>[0-9A-Fa-f.:]+)", re.I)

_UNRESOLVABLE_MARKERS = (
    "name or service not known",
    "unknown host",
    "cannot resolve",
    "could not find host",
    "temporary failure in name resolution",
    "no address associated with hostname",
)


class SystemPingProber(Prober):
    """
    Wraps the platform 'ping' binary, one packet per call, and turns its
    output into a ProbeOutcome. No transport handle is kept between calls.
    """

    def __init__(self,
                 ping_bin: str = DEFAULT_PING_BIN,
                 payload_size: int = DEFAULT_PAYLOAD_SIZE,
                 ttl: int = DEFAULT_TTL,
                 platform: str = sys.platform):
        self.ping = ping_bin
        self.payload_size = payload_size
        self.ttl = ttl
        self.platform = platform

    def _build_cmd(self, target: str, timeout_ms: int) -> list[str]:
        if self.platform == "win32":
            return [self.ping, "-n", "1", "-w", str(timeout_ms),
                    "-l", str(self.payload_size), "-i", str(self.ttl), target]
        if self.platform == "darwin":
            # -W is milliseconds on macOS
            return [self.ping, "-c", "1", "-W", str(timeout_ms),
                    "-s", str(self.payload_size), "-m", str(self.ttl), target]
        # iputils takes whole seconds for -W
        return [self.ping, "-n", "-c", "1", "-W", str(max(1, math.ceil(timeout_ms / 1000))),
                "-s", str(self.payload_size), "-t", str(self.ttl), target]

    def _run_cmd(self, cmd: list[str], timeout_ms: int) -> tuple[int, str]:
        # the binary enforces its own timeout; the extra margin only guards against a hung process
        try:
            proc = subprocess.run(cmd, check=False, stdout=subprocess.PIPE, stderr=subprocess.STDOUT,
                                  text=True, timeout=timeout_ms / 1000.0 + 2.0)
        except subprocess.TimeoutExpired as e:
            out = e.stdout or ""
            return -1, out if isinstance(out, str) else out.decode("utf-8", errors="replace")
        return proc.returncode, proc.stdout

    def parse_output(self, target: str, returncode: int, out: str) -> ProbeOutcome:
        lower = out.lower()

        if any(marker in lower for marker in _UNRESOLVABLE_MARKERS):
            detail = out.strip().splitlines()[-1] if out.strip() else "name lookup failed"
            raise UnresolvableTargetError(target, detail)

        match = _REPLY_RE.search(out)
        if match and returncode == 0:
            rtt_ms = 0 if match.group("op") == "<" else int(float(match.group("rtt")))
            nbytes = match.group("bytes") or match.group("wbytes")
            return ProbeOutcome.success(match.group("addr"), rtt_ms,
                                        int(nbytes) if nbytes else None)

        for line in out.splitlines():
            if "unreachable" in line.lower() or "exceeded" in line.lower() or "expired" in line.lower():
                m = _FROM_RE.search(line)
                source = m.group("addr").rstrip(":") if m else None
                if "unreachable" in line.lower():
                    return ProbeOutcome.failure(FailureStatus.DESTINATION_UNREACHABLE, source)
                return ProbeOutcome.failure(FailureStatus.TTL_EXPIRED, source)

        if returncode in (1, -1) or "timed out" in lower or "100% packet loss" in lower:
            return ProbeOutcome.failure(FailureStatus.TIMED_OUT)

        logger.debug("unrecognized ping output (rc=%s): %s", returncode, out[:200])
        return ProbeOutcome.failure(FailureStatus.UNKNOWN)

    def probe(self, target: str, timeout_ms: int) -> ProbeOutcome:
        cmd = self._build_cmd(target, timeout_ms)
        try:
            returncode, out = self._run_cmd(cmd, timeout_ms)
        except OSError as e:
            logger.debug("could not run %s: %s", self.ping, e)
            return ProbeOutcome.failure(FailureStatus.UNKNOWN)
        return self.parse_output(target, returncode, out)
