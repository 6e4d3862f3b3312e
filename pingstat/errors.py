# pingstat/errors.py


class PingStatError(Exception):
    """Base class for pingstat errors."""


class UnresolvableTargetError(PingStatError):
    """The target could not be resolved to any network address."""

    def __init__(self, target: str, detail: str = ""):
        self.target = target
        self.detail = detail
        msg = f"cannot resolve target {target!r}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class InvalidOptionsError(PingStatError, ValueError):
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")
