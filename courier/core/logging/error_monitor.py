import time
from dataclasses import dataclass
from typing import Dict

from .structured_logger import get_logger

_logger = get_logger("core.error_monitor")

@dataclass
class ErrorCounter:

    count: int = 0
    first_seen: float = 0.0
    last_seen: float = 0.0

class ErrorMonitor:
    """Sliding-window counter for non-fatal delivery errors.

    Errors that are recovered or deliberately not raised (artifact creation,
    temp file cleanup) are recorded here so leaks and degraded paths stay
    visible. Crossing a threshold inside the window logs a critical alert.
    """

    WINDOW_SECONDS = 300
    THRESHOLDS = {
        "cleanup": 3,
        "artifact": 5,
        "diagram": 5,
        "transport": 5,
    }
    ALERT_COOLDOWN = 600

    def __init__(self):
        self._counters: Dict[str, ErrorCounter] = {}
        self._last_alert: Dict[str, float] = {}

    def record(self, error_type: str, details: str = "") -> None:

        now = time.time()

        if error_type not in self._counters:
            self._counters[error_type] = ErrorCounter()

        counter = self._counters[error_type]

        if now - counter.first_seen > self.WINDOW_SECONDS:
            counter.count = 0
            counter.first_seen = now

        counter.count += 1
        counter.last_seen = now

        _logger.debug("Error recorded",
                     error_type=error_type,
                     count=counter.count,
                     window_seconds=self.WINDOW_SECONDS)

        threshold = self.THRESHOLDS.get(error_type, 10)
        if counter.count >= threshold:
            self._trigger_alert(error_type, counter, details)

    def _trigger_alert(self, error_type: str, counter: ErrorCounter, details: str) -> None:

        now = time.time()
        last = self._last_alert.get(error_type, 0)

        if now - last < self.ALERT_COOLDOWN:
            _logger.debug("Alert suppressed (cooldown)",
                         error_type=error_type,
                         cooldown_remaining=int(self.ALERT_COOLDOWN - (now - last)))
            return

        self._last_alert[error_type] = now

        _logger.critical(f"ALERT: {error_type} errors exceeded threshold",
                        count=counter.count,
                        window_seconds=self.WINDOW_SECONDS,
                        threshold=self.THRESHOLDS.get(error_type, 10),
                        details=details[:200] if details else "")

    def count(self, error_type: str) -> int:
        counter = self._counters.get(error_type)
        if counter is None or time.time() - counter.first_seen > self.WINDOW_SECONDS:
            return 0
        return counter.count

    def get_stats(self) -> Dict[str, Dict]:

        now = time.time()
        stats = {}
        for error_type, counter in self._counters.items():
            if now - counter.first_seen <= self.WINDOW_SECONDS:
                stats[error_type] = {
                    "count": counter.count,
                    "first_seen": counter.first_seen,
                    "last_seen": counter.last_seen,
                    "threshold": self.THRESHOLDS.get(error_type, 10),
                }
        return stats

    def reset(self) -> None:
        self._counters.clear()
        self._last_alert.clear()

error_monitor = ErrorMonitor()
