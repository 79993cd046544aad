"""
core/delay.py

What a bee feels now was done a while ago.

Heat takes time to move through the comb. A fixed-length FIFO stands in
for that transport: every step one value goes in and the oldest comes out.
"""

from __future__ import annotations
from collections import deque
from typing import Deque, List


class DelayBuffer:
    """
    Fixed-capacity FIFO, prefilled with a neutral value.

    Always holds exactly `size` values. With size 0 it stores nothing
    and push_pop hands the value straight back.
    """

    def __init__(self, size: int, fill: float = 0.0):
        if size < 0:
            raise ValueError(f"DelayBuffer size must be >= 0, got {size}")

        self.size = int(size)
        self._queue: Deque[float] = deque(float(fill) for _ in range(self.size))

    def push_pop(self, value: float) -> float:
        """Enqueue value and return the oldest one."""
        if self.size == 0:
            return value

        self._queue.append(value)
        return self._queue.popleft()

    def snapshot(self) -> List[float]:
        """Contents, oldest first."""
        return list(self._queue)

    def __len__(self) -> int:
        return len(self._queue)

    def __repr__(self) -> str:
        return f"DelayBuffer(size={self.size}, contents={self.snapshot()})"
