"""Hit/miss counters for memoized functions."""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict


@dataclass
class MemoStats:
    """Cache operation statistics for one memoized function."""

    hit_count: int = 0
    miss_count: int = 0
    set_count: int = 0

    # Error tracking
    read_errors: int = 0
    write_errors: int = 0
    call_errors: int = 0

    start_time: datetime = field(default_factory=datetime.now)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, counter: str) -> None:
        """Increment ``counter`` by one."""
        with self._lock:
            setattr(self, counter, getattr(self, counter) + 1)

    @property
    def hit_ratio(self) -> float:
        """Calculate cache hit ratio."""
        total_reads = self.hit_count + self.miss_count
        return self.hit_count / total_reads if total_reads > 0 else 0.0

    @property
    def uptime_seconds(self) -> float:
        return (datetime.now() - self.start_time).total_seconds()

    def reset(self) -> None:
        with self._lock:
            self.hit_count = 0
            self.miss_count = 0
            self.set_count = 0
            self.read_errors = 0
            self.write_errors = 0
            self.call_errors = 0
            self.start_time = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary."""
        return {
            "hit_count": self.hit_count,
            "miss_count": self.miss_count,
            "set_count": self.set_count,
            "read_errors": self.read_errors,
            "write_errors": self.write_errors,
            "call_errors": self.call_errors,
            "hit_ratio": self.hit_ratio,
            "uptime_seconds": self.uptime_seconds,
        }
