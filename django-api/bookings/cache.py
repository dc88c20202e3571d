"""Cache keys for event payloads and their invalidation."""

from django.core.cache import cache

AVAILABLE_EVENTS_KEY = "events:available"
CACHE_TIMEOUT = 60


def event_key(event_id: object) -> str:
    return f"events:{event_id}"


def invalidate_event(event_id: object) -> None:
    cache.delete_many([AVAILABLE_EVENTS_KEY, event_key(event_id)])
