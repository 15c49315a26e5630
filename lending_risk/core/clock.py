"""Logical block clock used to measure elapsed time for interest accrual."""

from abc import ABC, abstractmethod
import logging
from threading import RLock


logger = logging.getLogger(__name__)


class BlockClock(ABC):
    """Source of the current block height ("now")."""

    @abstractmethod
    def now(self) -> int:
        """Return the current monotonic, non-negative block height."""


class ManualBlockClock(BlockClock):
    """Clock advanced explicitly by the host, e.g. once per processed block."""

    def __init__(self, start: int = 0) -> None:
        if isinstance(start, bool) or not isinstance(start, int) or start < 0:
            raise ValueError("start must be a non-negative integer block height")
        self._height = start
        self._lock = RLock()

    def now(self) -> int:
        with self._lock:
            return self._height

    def advance(self, blocks: int = 1) -> int:
        """Move the clock forward by ``blocks`` and return the new height."""
        if isinstance(blocks, bool) or not isinstance(blocks, int) or blocks < 0:
            raise ValueError("blocks must be a non-negative integer")
        with self._lock:
            self._height += blocks
            return self._height

    def set_height(self, height: int) -> int:
        """Jump to ``height``; the clock never moves backwards."""
        if isinstance(height, bool) or not isinstance(height, int):
            raise ValueError("height must be an integer")
        with self._lock:
            if height < self._height:
                logger.warning("Refusing to move clock backwards current=%d requested=%d", self._height, height)
                raise ValueError("block height cannot decrease")
            self._height = height
            return self._height
