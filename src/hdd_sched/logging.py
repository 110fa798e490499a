"""Simulation log — structured records of what an experiment did.

A sweep runs tens of thousands of simulations, far too many to print.
The log keeps the events worth looking at afterwards as structured
entries in memory:

- the experiment seed and each finished load level (``experiment``),
- every individual run, with the load and trial it belongs to
  (``engine``, DEBUG),
- empty and rejected batches (``engine``, WARNING / ERROR).

Entries below the logger's threshold are dropped as they arrive, so a
full sweep only pays for per-run records when asked to (``--verbose``).
Trials may run on worker threads; appends are serialised by a lock, so
entries from concurrent trials interleave but are never lost.
"""

import threading
from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """Severity levels, ordered so thresholds are a plain ``>=``."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The component that generated the event (e.g. "engine").
        load: Batch size of the trial the event belongs to, if any.
        trial: Trial index within that load level, if any.

    """

    level: LogLevel
    message: str
    source: str
    load: int | None = None
    trial: int | None = None

    def __str__(self) -> str:
        """Format as ``[LEVEL] source (load L, trial T): message``."""
        where = ""
        if self.load is not None and self.trial is not None:
            where = f" (load {self.load}, trial {self.trial})"
        elif self.trial is not None:
            where = f" (trial {self.trial})"
        return f"[{self.level.name}] {self.source}{where}: {self.message}"


class Logger:
    """Thread-safe, append-only buffer of simulation events."""

    def __init__(self, *, min_level: LogLevel = LogLevel.INFO) -> None:
        """Create an empty logger.

        Args:
            min_level: Entries below this level are discarded on arrival.

        """
        self._min_level = min_level
        self._entries: list[LogEntry] = []
        self._lock = threading.Lock()

    @property
    def min_level(self) -> LogLevel:
        """Return the recording threshold."""
        return self._min_level

    @property
    def entries(self) -> list[LogEntry]:
        """Return all recorded entries in arrival order."""
        with self._lock:
            return list(self._entries)

    def enabled_for(self, level: LogLevel) -> bool:
        """Return True if an entry at ``level`` would be kept."""
        return level >= self._min_level

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        load: int | None = None,
        trial: int | None = None,
    ) -> None:
        """Record an event if it meets the threshold."""
        if not self.enabled_for(level):
            return
        entry = LogEntry(level=level, message=message, source=source, load=load, trial=trial)
        with self._lock:
            self._entries.append(entry)

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
        load: int | None = None,
        trial: int | None = None,
    ) -> list[LogEntry]:
        """Return recorded entries matching every given criterion."""
        return [
            e
            for e in self.entries
            if (min_level is None or e.level >= min_level)
            and (source is None or e.source == source)
            and (load is None or e.load == load)
            and (trial is None or e.trial == trial)
        ]

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        """Return the number of recorded entries."""
        with self._lock:
            return len(self._entries)
