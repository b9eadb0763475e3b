"""Transient notifications shown as toasts on the next page render."""

import time
import threading
from collections import deque
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List


@dataclass
class Notification:
    title: str
    description: str = ""
    variant: str = "default"   # "default" or "destructive"
    created_at: int = field(default_factory=lambda: int(time.time()))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class Notifier:
    def __init__(self, maxlen: int = 50):
        self._pending = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def notify(self, title: str, description: str = "", variant: str = "default") -> Notification:
        note = Notification(title=title, description=description, variant=variant)
        with self._lock:
            self._pending.append(note)
        return note

    def error(self, title: str, error: Exception) -> Notification:
        """Failure toast carrying the raw backend error message."""
        return self.notify(title, str(error), variant="destructive")

    def drain(self) -> List[Notification]:
        with self._lock:
            items = list(self._pending)
            self._pending.clear()
        return items

    def peek(self) -> List[Notification]:
        with self._lock:
            return list(self._pending)


notifier = Notifier()
