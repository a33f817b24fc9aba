# storefront/utils/deadline.py
import time

from storefront.domain.errors import DeadlineExceeded


class Deadline:
    """
    Per-request time budget.

    Services call check() before every store, cache or payment call so an
    expired request stops before doing more work instead of finishing it
    silently.
    """

    def __init__(self, seconds: float | None = None):
        self.expires_at = None if seconds is None else time.monotonic() + seconds

    @classmethod
    def none(cls) -> "Deadline":
        return cls(None)

    def remaining(self) -> float | None:
        if self.expires_at is None:
            return None
        return max(0.0, self.expires_at - time.monotonic())

    def expired(self) -> bool:
        return self.expires_at is not None and time.monotonic() >= self.expires_at

    def check(self, step: str) -> None:
        if self.expired():
            raise DeadlineExceeded(f"Request deadline exceeded before {step}")
