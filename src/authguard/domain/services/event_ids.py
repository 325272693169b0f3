"""
Audit event id generation.

Event ids keep the readable ``<action>-<suffix>`` shape so they can be
grepped by action. The suffix comes from an injected generator so tests
can make ids deterministic.
"""

import itertools
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional
from uuid import uuid4


class EventIdGenerator(ABC):
    """Port for producing unique audit event ids."""

    @abstractmethod
    def next_id(self, action: str) -> str:
        """
        Produce a new id for an event describing ``action``.

        Args:
            action: Action prefix, e.g. "password-updated"

        Returns:
            Id unique for the lifetime of this generator
        """
        pass


class SequentialEventIdGenerator(EventIdGenerator):
    """
    Clock plus sequence ids: ``<action>-<epoch-millis>-<seq>``.

    The sequence keeps ids unique when two events share a millisecond.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None, start: int = 1):
        """
        Initialize generator.

        Args:
            clock: Returns seconds since the epoch (default: time.time)
            start: First sequence number
        """
        self._clock = clock or time.time
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next_id(self, action: str) -> str:
        with self._lock:
            seq = next(self._counter)
        millis = int(self._clock() * 1000)
        return f"{action}-{millis}-{seq}"


class UuidEventIdGenerator(EventIdGenerator):
    """Random ids: ``<action>-<uuid4 hex>``."""

    def next_id(self, action: str) -> str:
        return f"{action}-{uuid4().hex}"


def create_event_id_generator(strategy: str = "sequential") -> EventIdGenerator:
    """Build the generator named by configuration."""
    if strategy == "uuid":
        return UuidEventIdGenerator()
    if strategy == "sequential":
        return SequentialEventIdGenerator()
    raise ValueError(f"Unknown event id strategy: {strategy}")
