"""
Retry handling for calls to remote services
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from enum import Enum
from functools import wraps

logger = logging.getLogger(__name__)


class RetryStrategy(Enum):
    FIXED_DELAY = "fixed_delay"
    EXPONENTIAL_BACKOFF = "exponential_backoff"
    LINEAR_BACKOFF = "linear_backoff"


@dataclass
class RetryConfig:
    """
    How often and on what to retry a coroutine

    Exceptions in never_retry (or NonRetryableError) propagate at once, even
    when they also match retry_on. Anything matching neither propagates too.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    strategy: RetryStrategy = RetryStrategy.EXPONENTIAL_BACKOFF
    backoff_multiplier: float = 2.0
    jitter: bool = True
    retry_on: tuple = (Exception,)
    never_retry: tuple = ()

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the given zero-based attempt failed"""
        if self.strategy == RetryStrategy.FIXED_DELAY:
            delay = self.base_delay
        elif self.strategy == RetryStrategy.LINEAR_BACKOFF:
            delay = self.base_delay * (attempt + 1)
        else:
            delay = self.base_delay * (self.backoff_multiplier**attempt)

        delay = min(delay, self.max_delay)
        if self.jitter:
            delay += delay * 0.1 * random.random()
        return delay


class NonRetryableError(Exception):
    """Raised by a wrapped call to stop retries"""


def with_retry(config: RetryConfig):
    """Decorate a coroutine function so matching failures are retried with backoff"""

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            attempt = 0
            while True:
                try:
                    result = await func(*args, **kwargs)
                except (NonRetryableError, *config.never_retry):
                    raise
                except config.retry_on as e:
                    if attempt + 1 >= config.max_attempts:
                        logger.error(f"{func.__name__} gave up after {config.max_attempts} attempts: {e}")
                        raise

                    delay = config.delay_for(attempt)
                    logger.warning(
                        f"{func.__name__} attempt {attempt + 1} failed ({e}), retrying in {delay:.2f}s"
                    )
                    await asyncio.sleep(delay)
                    attempt += 1
                    continue

                if attempt:
                    logger.info(f"{func.__name__} succeeded on attempt {attempt + 1}")
                return result

        return wrapper

    return decorator
