"""Wall-clock timing of named operations (fetches, renders)."""

import logging
import time
from contextlib import contextmanager

log = logging.getLogger(__name__)


class PerformanceMonitor:
    def __init__(self):
        self._marks: dict[str, float] = {}
        self._measures: dict[str, float] = {}

    def start(self, label: str) -> None:
        self._marks[label] = time.perf_counter()

    def end(self, label: str) -> float:
        started = self._marks.pop(label, None)
        if started is None:
            log.warning("No start mark found for %s", label)
            return 0.0
        duration = (time.perf_counter() - started) * 1000
        self._measures[label] = duration
        log.debug("%s took %.2fms", label, duration)
        return duration

    def duration(self, label: str) -> float | None:
        return self._measures.get(label)

    def measurements(self) -> dict[str, float]:
        return dict(self._measures)

    def clear(self) -> None:
        self._marks.clear()
        self._measures.clear()

    @contextmanager
    def measure(self, label: str):
        self.start(label)
        try:
            yield
        finally:
            self.end(label)

    def summary(self) -> dict:
        total = sum(self._measures.values())
        operations = {
            label: {
                "duration": round(ms, 2),
                "percentage": round(ms / total * 100, 1) if total else 0.0,
            }
            for label, ms in self._measures.items()
        }
        return {"total": round(total, 2), "operations": operations}

    def log_summary(self) -> None:
        summary = self.summary()
        log.debug("Performance summary: %.2fms total", summary["total"])
        for label, entry in summary["operations"].items():
            log.debug("  %s: %.2fms (%.1f%%)", label, entry["duration"], entry["percentage"])


monitor = PerformanceMonitor()
