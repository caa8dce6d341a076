"""Django signals for cache invalidation."""

import logging

from django.core.cache import cache
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from registrations.cache_keys import line_items_key
from registrations.models import Event, LineItem

logger = logging.getLogger(__name__)


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate caches when an event is saved or deleted."""
    cache.delete(line_items_key(instance.id))
    logger.debug("Invalidated cache for event %s", instance.id)


@receiver([post_save, post_delete], sender=LineItem)
def invalidate_line_item_cache(sender, instance, **kwargs):
    """Invalidate the owning event's line item cache when a line item changes."""
    cache.delete(line_items_key(instance.event_id))
    logger.debug("Invalidated line item cache for event %s", instance.event_id)
