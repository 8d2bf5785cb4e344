"""Retry strategies using Strategy Pattern."""
import asyncio
from abc import ABC, abstractmethod
from typing import Optional

from ..config import RetryConfig


class RetryStrategy(ABC):
    """Abstract retry strategy."""

    @abstractmethod
    def should_retry(self, status: Optional[int], retry_count: int, max_retries: int) -> bool:
        """Determines if request should be retried.

        Args:
            status: HTTP status, or None for network errors and timeouts
            retry_count: Retries already performed
            max_retries: Retry budget
        """
        pass

    @abstractmethod
    async def wait_async(self, retry_count: int):
        """Waits before retry (async)."""
        pass


class ExponentialBackoffStrategy(RetryStrategy):
    """Exponential backoff retry strategy."""

    def __init__(self, config: Optional[RetryConfig] = None):
        self._config = config or RetryConfig()

    def should_retry(self, status: Optional[int], retry_count: int, max_retries: int) -> bool:
        """Retries network failures and transient HTTP statuses."""
        if retry_count >= max_retries:
            return False
        return status is None or status in self._config.retry_on_status

    async def wait_async(self, retry_count: int):
        """Waits with exponential backoff (async)."""
        await asyncio.sleep(self._config.calculate_delay(retry_count))
