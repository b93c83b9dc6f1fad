"""
Holding Repository
Latest holding per (user, symbol), in-memory
"""

import threading
from typing import Dict, List, Optional, Tuple

from piggy.domain.models import Holding


class InMemoryHoldingRepository:
    """Repository for Holding"""

    def __init__(self):
        self._holdings: Dict[Tuple[str, str], Holding] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str, symbol: str) -> Optional[Holding]:
        with self._lock:
            return self._holdings.get((user_id, symbol))

    def put(self, user_id: str, holding: Holding) -> None:
        if not holding.symbol:
            raise ValueError("Holding symbol cannot be empty")
        with self._lock:
            self._holdings[(user_id, holding.symbol)] = holding

    def list_for_user(self, user_id: str) -> List[Holding]:
        with self._lock:
            return [h for (uid, _), h in self._holdings.items() if uid == user_id]
