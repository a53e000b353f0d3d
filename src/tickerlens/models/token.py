"""Access token model."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AccessToken:
    """Bearer token for the upstream quote service.

    Attributes:
        token: Opaque bearer token.
        expires_at: Absolute expiry on the issuing manager's clock (seconds).
    """

    token: str = field(repr=False)
    expires_at: float

    def remaining(self, now: float) -> float:
        return self.expires_at - now

    def is_fresh(self, now: float, margin: float) -> bool:
        """True while at least ``margin`` seconds of validity remain."""
        return self.remaining(now) >= margin
