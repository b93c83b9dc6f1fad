"""
Piggy Ledger Repository
Append-only storage of ledger entries (in-memory)
"""

import threading
from collections import defaultdict
from typing import Dict, List

from piggy.domain.models import LedgerEntry


class InMemoryLedgerRepository:
    """Repository for LedgerEntry"""

    def __init__(self):
        self._entries: Dict[str, List[LedgerEntry]] = defaultdict(list)
        self._lock = threading.Lock()

    def append(self, entry: LedgerEntry) -> None:
        """
        Append one entry to the user's ledger

        Raises:
            ValueError: If an entry with the same id already exists
        """
        with self._lock:
            entries = self._entries[entry.user_id]
            if any(e.id == entry.id for e in entries):
                raise ValueError(f"Duplicate ledger entry id: {entry.id}")
            entries.append(entry)

    def list_entries(self, user_id: str) -> List[LedgerEntry]:
        """Full ordered ledger for a user (copy)"""
        with self._lock:
            return list(self._entries.get(user_id, ()))

    def user_ids(self) -> List[str]:
        with self._lock:
            return list(self._entries)
