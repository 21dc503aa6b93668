"""Portfolio ledger: persistence and lifecycle rules."""

from tracker.ledger.lifecycle import PositionLifecycleManager
from tracker.ledger.store import LedgerCorruptError, LedgerStore

__all__ = ["LedgerCorruptError", "LedgerStore", "PositionLifecycleManager"]
