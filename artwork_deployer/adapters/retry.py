"""Bounded retry timing shared by HTTP-backed adapters."""

from __future__ import annotations

from dataclasses import dataclass
import random
from typing import Callable


@dataclass(frozen=True)
class RetryStrategy:
    """Immutable retry strategy config and calculation helpers.

    Attributes:
        attempts: Total attempts including the first one.
        backoff_base_seconds: Base delay for exponential backoff.
        max_backoff_seconds: Exponential delay cap before jitter.
        jitter_min_multiplier: Minimum jitter multiplier.
        jitter_max_multiplier: Maximum jitter multiplier.
        random_unit_interval_provider: Provider returning value in [0.0, 1.0].
    """

    attempts: int = 1
    backoff_base_seconds: float = 2.0
    max_backoff_seconds: float = 30.0
    jitter_min_multiplier: float = 0.5
    jitter_max_multiplier: float = 1.5
    random_unit_interval_provider: Callable[[], float] = random.random

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ValueError("attempts must be >= 1")
        if self.backoff_base_seconds < 0:
            raise ValueError("backoff_base_seconds must be >= 0")
        if self.max_backoff_seconds <= 0:
            raise ValueError("max_backoff_seconds must be > 0")
        if self.jitter_min_multiplier <= 0:
            raise ValueError("jitter_min_multiplier must be > 0")
        if self.jitter_max_multiplier < self.jitter_min_multiplier:
            raise ValueError("jitter_max_multiplier must be >= jitter_min_multiplier")

    def strategy_has_retry_after(self, attempt_number: int) -> bool:
        """Return whether another attempt is allowed after the given one.

        Args:
            attempt_number: One-based number of the attempt that just finished.

        Returns:
            bool: True when attempts remain.
        """

        return attempt_number < self.attempts

    def strategy_calculate_retry_wait_seconds(self, retry_index: int) -> float:
        """Calculate exponential retry wait with cap and jitter.

        Args:
            retry_index: Zero-based retry attempt index.

        Returns:
            float: Computed wait seconds before the retry.

        Raises:
            ValueError: Raised when retry index is negative.
            RuntimeError: Raised when jitter provider returns out-of-range value.
        """

        if retry_index < 0:
            raise ValueError("retry_index must be >= 0")

        backoff_seconds = self.backoff_base_seconds * (2**retry_index)
        capped_backoff_seconds = min(backoff_seconds, self.max_backoff_seconds)
        return capped_backoff_seconds * self.strategy_calculate_jitter_multiplier()

    def strategy_calculate_jitter_multiplier(self) -> float:
        """Return jitter multiplier using configured min/max bounds.

        Returns:
            float: Jitter multiplier value.

        Raises:
            RuntimeError: Raised when jitter source returns value outside [0.0, 1.0].
        """

        random_ratio = float(self.random_unit_interval_provider())
        if random_ratio < 0.0 or random_ratio > 1.0:
            raise RuntimeError("random_unit_interval_provider must return a value in [0.0, 1.0]")

        jitter_span = self.jitter_max_multiplier - self.jitter_min_multiplier
        return self.jitter_min_multiplier + (random_ratio * jitter_span)
