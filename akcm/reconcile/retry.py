# AKCM Retry Strategy
# Retry ceilings and backoff delays per actuation style

from dataclasses import dataclass
from typing import Optional

from akcm.adapters.base import Actuator, ActuationStyle
from akcm.config.schema import Policy
from akcm.utils.timing import ms


@dataclass(frozen=True)
class RetryStrategy:
    """
    How many times a transient failure is retried and how long to wait.

    Delays follow ``backoff_base * 2**attempt`` capped at ``max_delay``.
    There is no jitter, so successive delays never decrease.
    """

    max_retries: int
    backoff_base: float = 0.0
    max_delay: float = 60.0

    def should_retry(self, retries_done: int) -> bool:
        """True if another attempt is allowed after ``retries_done`` retries."""
        return retries_done < self.max_retries

    def delay_for(self, attempt: int, retry_after: Optional[float] = None) -> float:
        """
        Delay before retry number ``attempt`` (0-indexed).

        Args:
            attempt: Index of the retry about to happen.
            retry_after: Server hint in seconds; can lengthen, never shorten.

        Returns:
            Seconds to sleep.
        """
        delay = min(self.max_delay, max(0.0, self.backoff_base * (2**attempt)))
        if retry_after is not None and retry_after > delay:
            delay = min(self.max_delay, retry_after)
        return delay

    @classmethod
    def for_actuator(cls, actuator: Actuator, policy: Policy, max_delay_ms: int = 60000) -> "RetryStrategy":
        """
        Pick the strategy matching an actuator's style.

        Fire-and-verify actuators get one immediate retry of the same action.
        Fire-and-trust actuators get ``policy.max_retries`` retries with
        exponential backoff.
        """
        if actuator.style == ActuationStyle.FIRE_AND_VERIFY:
            return cls(max_retries=min(1, max(0, policy.max_retries)), backoff_base=0.0, max_delay=ms(max_delay_ms))
        return cls(
            max_retries=max(0, policy.max_retries),
            backoff_base=ms(policy.backoff_base_ms),
            max_delay=ms(max_delay_ms),
        )
