# apps/api/sessions.py
# PL: Kalkulatory trzymane w pamięci procesu, jeden na sesję. EN: One in-memory calculator per session.
from __future__ import annotations
import logging
import threading
from collections import OrderedDict
from contextlib import contextmanager
from typing import Iterator, Tuple

from apps.calc.engine import Calculator

logger = logging.getLogger(__name__)


class CalculatorSessions:
    def __init__(self, max_sessions: int = 1000):
        self.max_sessions = max(1, max_sessions)
        self._items: "OrderedDict[str, Tuple[Calculator, threading.Lock]]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._items)

    def _get_or_create(self, session_id: str) -> Tuple[Calculator, threading.Lock]:
        with self._lock:
            item = self._items.get(session_id)
            if item is None:
                item = (Calculator(), threading.Lock())
                self._items[session_id] = item
                while len(self._items) > self.max_sessions:
                    dropped, _ = self._items.popitem(last=False)
                    logger.info("Dropping calculator session %s (cap %d)", dropped, self.max_sessions)
            else:
                self._items.move_to_end(session_id)
            return item

    @contextmanager
    def use(self, session_id: str) -> Iterator[Calculator]:
        calc, lock = self._get_or_create(session_id)
        with lock:
            yield calc
