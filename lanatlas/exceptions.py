"""Exception hierarchy for lanatlas."""


class LanAtlasError(Exception):
    """Base exception for all lanatlas errors."""


class InvalidCidrError(LanAtlasError, ValueError):
    """CIDR string is malformed or has an out-of-range octet or prefix."""

    def __init__(self, cidr: str, reason: str):
        self.cidr = cidr
        self.reason = reason
        super().__init__(f"Invalid CIDR {cidr!r}: {reason}")
