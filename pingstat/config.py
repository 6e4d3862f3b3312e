# pingstat/config.py
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional

from pingstat.errors import InvalidOptionsError

DEFAULT_COUNT = 1
DEFAULT_TIMEOUT_MS = 3000
DEFAULT_UNBOUNDED_WAIT_MS = 1000
DEFAULT_SOUND_THRESHOLD = 5
DEFAULT_PAYLOAD_SIZE = 32
DEFAULT_TTL = 128

MAX_PAYLOAD_SIZE = 65500

UNITS = {"ms": 1, "s": 1000}


class SoundPolicy(str, Enum):
    SILENT = "silent"
    UNTIL_FIRST_SUCCESS = "until-first-success"
    UNTIL_FIRST_FAILURE = "until-first-failure"
    AFTER_EVERY_SUCCESS_AFTER_THRESHOLD = "after-every-success-after-threshold"
    AFTER_EVERY_FAILURE_AFTER_THRESHOLD = "after-every-failure-after-threshold"
    ALWAYS_ON_SUCCESS = "always-on-success"
    ALWAYS_ON_FAILURE = "always-on-failure"
    ALWAYS = "always"


@dataclass(frozen=True)
class RunOptions:
    target: str
    count: Optional[int] = DEFAULT_COUNT      # None = run until cancelled
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    wait_ms: int = 0
    resolve_name: bool = False
    announce: bool = False
    sound_policy: SoundPolicy = SoundPolicy.SILENT
    sound_threshold: int = DEFAULT_SOUND_THRESHOLD   # negative = unlimited

    payload_size: int = DEFAULT_PAYLOAD_SIZE
    ttl: int = DEFAULT_TTL

    def __post_init__(self):
        if not self.target or not self.target.strip():
            raise InvalidOptionsError("target", "must be a non-empty string")
        if self.count is not None and self.count < 1:
            raise InvalidOptionsError("count", f"must be >= 1, got {self.count}")
        if self.timeout_ms <= 0:
            raise InvalidOptionsError("timeout", f"must be > 0, got {self.timeout_ms}")
        if self.wait_ms < 0:
            raise InvalidOptionsError("wait", f"must be >= 0, got {self.wait_ms}")
        if not 0 <= self.payload_size <= MAX_PAYLOAD_SIZE:
            raise InvalidOptionsError("payload_size", f"must be within 0..{MAX_PAYLOAD_SIZE}")
        if not 1 <= self.ttl <= 255:
            raise InvalidOptionsError("ttl", "must be within 1..255")
        if self.count is None and not self.announce:
            raise InvalidOptionsError("announce", "is always on for unbounded runs")

    @property
    def unbounded(self) -> bool:
        return self.count is None

    def to_dict(self) -> dict:
        d = asdict(self)
        d["sound_policy"] = self.sound_policy.value
        return d


def to_millis(value, unit: str = "ms") -> int:
    if unit not in UNITS:
        raise InvalidOptionsError("unit", f"expected one of {sorted(UNITS)}, got {unit!r}")
    millis = value * UNITS[unit]
    # 1 ms resolution; positive sub-millisecond values round up to 1
    return max(1, int(millis)) if millis > 0 else int(millis)


def build_options(target: str,
                  count: Optional[int] = DEFAULT_COUNT,
                  timeout: Optional[float] = None,
                  timeout_unit: str = "ms",
                  wait: Optional[float] = None,
                  wait_unit: str = "ms",
                  resolve_name: bool = False,
                  unbounded: bool = False,
                  announce: bool = False,
                  sound_policy="silent",
                  sound_threshold: int = DEFAULT_SOUND_THRESHOLD,
                  payload_size: int = DEFAULT_PAYLOAD_SIZE,
                  ttl: int = DEFAULT_TTL) -> RunOptions:
    """Resolve the raw parameter surface into one fully-defaulted RunOptions.

    Unbounded mode (unbounded=True or count=None) implies a 1000 ms wait
    unless one was given, and always announces each probe.
    """
    unbounded = unbounded or count is None

    timeout_ms = to_millis(timeout, timeout_unit) if timeout else DEFAULT_TIMEOUT_MS

    if wait is None:
        wait_ms = DEFAULT_UNBOUNDED_WAIT_MS if unbounded else 0
    else:
        wait_ms = to_millis(wait, wait_unit)

    try:
        policy = SoundPolicy(sound_policy)
    except ValueError:
        choices = ", ".join(p.value for p in SoundPolicy)
        raise InvalidOptionsError("sound_policy", f"expected one of {choices}, got {sound_policy!r}") from None

    return RunOptions(
        target=target.strip() if isinstance(target, str) else target,
        count=None if unbounded else count,
        timeout_ms=timeout_ms,
        wait_ms=wait_ms,
        resolve_name=resolve_name,
        announce=announce or unbounded,
        sound_policy=policy,
        sound_threshold=sound_threshold,
        payload_size=payload_size,
        ttl=ttl,
    )
