"""Django signals for cache invalidation.

Seat counters move through queryset updates, which send no signals, but
every seat movement comes with a reservation write, so listening to
reservations covers them. Invalidation waits for the commit so a
concurrent read cannot re-cache uncommitted state.
"""

from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from bookings.cache import invalidate_event
from bookings.models import Event, Reservation


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate caches when an event is saved or deleted."""
    event_id = instance.pk
    transaction.on_commit(lambda: invalidate_event(event_id))


@receiver([post_save, post_delete], sender=Reservation)
def invalidate_reservation_event_cache(sender, instance, **kwargs):
    """Invalidate the event's caches when one of its reservations changes."""
    event_id = instance.event_id
    transaction.on_commit(lambda: invalidate_event(event_id))
