"""
Ordered fallback chains.

Both the IDE channel fallback and the Java runtime precedence are expressed
as an ordered list of named steps. Each step either produces a value, returns
None to pass, or raises one of the chain's tolerated exceptions to fail; the
first step that produces a value wins.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Generic, List, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class FallbackAttempt:
    """Outcome of a single step that did not produce a value."""

    name: str
    error: Optional[BaseException] = None


@dataclass
class FallbackResult(Generic[T]):
    """Value produced by the winning step."""

    name: str
    value: T
    attempts: List[FallbackAttempt] = field(default_factory=list)


class FallbackExhausted(Exception):
    """Raised when no step of a chain produced a value."""

    def __init__(self, attempts: List[FallbackAttempt]):
        self.attempts = attempts
        names = ", ".join(a.name for a in attempts) or "none"
        super().__init__(f"All fallback steps failed (attempted: {names})")

    @property
    def attempted(self) -> List[str]:
        return [a.name for a in self.attempts]


class FallbackChain(Generic[T]):
    """
    Tries named steps in order until one succeeds.

    Example:
        >>> chain = FallbackChain(tolerate=(IOError,))
        >>> chain.add("release", lambda: None)
        >>> chain.add("eap", lambda: Path("/ides/IC-2020.2"))
        >>> chain.run().name
        'eap'
    """

    def __init__(self, tolerate: Tuple[Type[BaseException], ...] = ()):
        """
        Initialize chain.

        Args:
            tolerate: Exception types that mark a step as failed instead of
                aborting the whole chain
        """
        self._steps: List[Tuple[str, Callable[[], Optional[T]]]] = []
        self._tolerate = tolerate

    def add(self, name: str, step: Callable[[], Optional[T]]) -> "FallbackChain[T]":
        """Append a step; returns the chain for fluent construction."""
        self._steps.append((name, step))
        return self

    @property
    def step_names(self) -> List[str]:
        return [name for name, _ in self._steps]

    def run(self) -> FallbackResult[T]:
        """
        Run steps in order.

        Returns:
            FallbackResult of the first step that produced a value

        Raises:
            FallbackExhausted: If every step returned None or failed
        """
        attempts: List[FallbackAttempt] = []

        for name, step in self._steps:
            try:
                value = step()
            except self._tolerate as e:
                logger.debug(f"Fallback step '{name}' failed: {e}")
                attempts.append(FallbackAttempt(name, e))
                continue

            if value is not None:
                return FallbackResult(name=name, value=value, attempts=attempts)

            logger.debug(f"Fallback step '{name}' produced no value")
            attempts.append(FallbackAttempt(name))

        raise FallbackExhausted(attempts)


def first_success(
    steps: List[Tuple[str, Callable[[], Optional[T]]]],
    tolerate: Tuple[Type[BaseException], ...] = (),
) -> FallbackResult[T]:
    """
    Run an ordered list of (name, step) pairs and return the first value.

    Shorthand for building a FallbackChain and running it.
    """
    chain: FallbackChain[T] = FallbackChain(tolerate=tolerate)
    for name, step in steps:
        chain.add(name, step)
    return chain.run()


__all__ = [
    "FallbackAttempt",
    "FallbackResult",
    "FallbackExhausted",
    "FallbackChain",
    "first_success",
]
