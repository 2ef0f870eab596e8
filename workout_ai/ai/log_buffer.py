from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Callable, Deque, List, Optional, Protocol

from workout_ai.ai.types import AILogEntry


logger = logging.getLogger("workout_ai.ai.log_buffer")

DEFAULT_CAPACITY = 100

LogListener = Callable[[AILogEntry], None]


class LogSink(Protocol):
    def write(self, entry: AILogEntry) -> None:  # pragma: no cover - interface
        ...

    def clear(self) -> None:  # pragma: no cover - interface
        ...


class AILogBuffer:
    """Bounded, evict-oldest record of AI activity for operators.

    Listener and sink failures are logged and dropped so that recording an
    entry can never affect the request that produced it.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, sink: Optional[LogSink] = None) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self.sink = sink
        self._entries: Deque[AILogEntry] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self._listeners: List[LogListener] = []

    def append(self, entry: AILogEntry, mirror: bool = True) -> None:
        with self._lock:
            self._entries.append(entry)
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(entry)
            except Exception:
                logger.warning("AI log listener failed", exc_info=True)

        if mirror:
            self.mirror(entry)

    def mirror(self, entry: AILogEntry) -> None:
        """Write one entry to the sink, if any. Failures are logged only."""
        if self.sink is None:
            return
        try:
            self.sink.write(entry)
        except Exception:
            logger.warning("AI log sink unavailable, entry kept in memory only", exc_info=True)

    def entries(self) -> List[AILogEntry]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        if self.sink is not None:
            try:
                self.sink.clear()
            except Exception:
                logger.warning("Failed to clear AI log sink", exc_info=True)

    def subscribe(self, listener: LogListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
