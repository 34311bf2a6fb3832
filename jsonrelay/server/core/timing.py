"""
Per-request timing used for the access log line.
"""

import time
from dataclasses import dataclass
from typing import Optional


@dataclass
class TimingRecord:
    started: float
    finished: Optional[float] = None
    duration: float = 0.0
    per_second: float = 0.0

    @classmethod
    def begin(cls) -> "TimingRecord":
        return cls(started=time.perf_counter())

    def finish(self) -> "TimingRecord":
        self.finished = time.perf_counter()
        self.duration = round(self.finished - self.started, 4)
        # Sub-0.1ms requests round to zero.
        self.per_second = round(1.0 / self.duration, 2) if self.duration > 0 else 0.0
        return self
