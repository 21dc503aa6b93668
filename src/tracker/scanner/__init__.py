"""Moving-average scanner."""

from tracker.scanner.scanner import (
    MovingAverageScanner,
    ScanReport,
    ScanResult,
    deviation_pct,
)

__all__ = ["MovingAverageScanner", "ScanReport", "ScanResult", "deviation_pct"]
