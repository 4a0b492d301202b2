"""Session credential DTO.

Authentication is out of scope: an upstream component verifies the user and
hands the engine an opaque credential naming the provider it was issued for
and, optionally, when it stops being valid.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class SessionCredential:
    """A verified session for one provider."""

    provider_id: str
    token: str
    expires_at: datetime | None = None  # tz-aware; None means no expiry

    def __post_init__(self) -> None:
        if self.expires_at is not None and self.expires_at.tzinfo is None:
            raise ValueError("expires_at must be tz-aware.")

    def is_expired(self, now: datetime) -> bool:
        """True if the credential is no longer valid at ``now``."""
        return self.expires_at is not None and now >= self.expires_at

    def __repr__(self) -> str:
        # keep the token out of logs
        return (
            f"SessionCredential(provider_id={self.provider_id!r}, "
            f"token='***', expires_at={self.expires_at!r})"
        )
