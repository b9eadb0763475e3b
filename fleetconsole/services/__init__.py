"""
Data access layer used by the pages and the JSON API.

Each operation issues one query or mutation; mutations invalidate a named
cache bucket and queue a notification.
"""

from .cache import query_cache, QueryCache
from .notifications import notifier, Notifier, Notification

__all__ = ["query_cache", "QueryCache", "notifier", "Notifier", "Notification"]
