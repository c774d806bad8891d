"""
BFS frontier and visited-set tracking.
"""
from __future__ import annotations

from collections import Counter, deque
from typing import Deque, Dict, Optional, Tuple


class Frontier:
    """FIFO queue of URLs awaiting a fetch plus the set of visited URLs.

    The queue admits duplicates; callers check :meth:`has_visited` right
    after :meth:`dequeue`. With *dedupe_on_enqueue* a URL that is already
    visited or already waiting is not queued again.
    """

    def __init__(self, dedupe_on_enqueue: bool = False) -> None:
        self.dedupe_on_enqueue = dedupe_on_enqueue
        self._queue: Deque[str] = deque()
        self._pending: Counter[str] = Counter()
        # dict keeps first-visit order for the report
        self._visited: Dict[str, None] = {}

    def enqueue(self, url: str) -> bool:
        """Append *url* to the tail; returns False when it was deduplicated."""
        if self.dedupe_on_enqueue and (url in self._visited or self._pending[url]):
            return False
        self._queue.append(url)
        self._pending[url] += 1
        return True

    def dequeue(self) -> Optional[str]:
        """Remove and return the head, or None when the frontier is empty."""
        if not self._queue:
            return None
        url = self._queue.popleft()
        self._pending[url] -= 1
        if not self._pending[url]:
            del self._pending[url]
        return url

    def has_visited(self, url: str) -> bool:
        return url in self._visited

    def mark_visited(self, url: str) -> None:
        if url in self._visited:
            raise ValueError(f"{url} is already visited")
        self._visited[url] = None

    @property
    def visited(self) -> Tuple[str, ...]:
        return tuple(self._visited)

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)
