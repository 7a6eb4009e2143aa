"""
Fixed-delay retry policy for generation requests.

Every GenerationError is retried the same way, with a fixed delay and no
special-casing by error kind. When all attempts fail, the last error is
re-raised unchanged.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from scribe.contexts.inference.client import GenerationClient, GenerationOptions
from scribe.contexts.inference.exceptions import GenerationError
from scribe.contexts.inference.logger import log_retry

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retries with a fixed delay.

    Attributes:
        retries: Additional attempts after the first (0 = exactly one attempt)
        delay_s: Pause between attempts in seconds
    """

    retries: int = 2
    delay_s: float = 2.0

    @property
    def max_attempts(self) -> int:
        return max(0, self.retries) + 1

    def call(self, operation: Callable[[], T], sleep: Callable[[float], None] = time.sleep) -> T:
        """
        Run operation until it succeeds or attempts run out.

        Raises:
            GenerationError: The error from the final attempt
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                return operation()
            except GenerationError as e:
                if attempt == self.max_attempts:
                    raise
                log_retry(attempt, self.max_attempts, e, self.delay_s)
                sleep(self.delay_s)


def generate_with_retry(
    client: GenerationClient,
    prompt: str,
    options: Optional[GenerationOptions] = None,
    retries: Optional[int] = None,
    delay_s: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """
    Call client.generate() under a RetryPolicy.

    Args:
        client: Generation client
        prompt: Full prompt text
        options: Generation parameters (default: client defaults)
        retries: Additional attempts (default: settings.retry_attempts)
        delay_s: Delay between attempts (default: settings.retry_delay_s)
        sleep: Sleep function (tests pass a no-op)

    Returns:
        Trimmed generated text
    """
    policy = RetryPolicy(
        retries=client.settings.retry_attempts if retries is None else retries,
        delay_s=client.settings.retry_delay_s if delay_s is None else delay_s,
    )
    return policy.call(lambda: client.generate(prompt, options), sleep=sleep)
