import logging
import uuid

from django.db import transaction

from notifications.events import (
    MenuItemCreated,
    MenuItemDeleted,
    MenuItemUpdated,
    MenuRefresh,
    Topic,
)
from orders.exceptions import MenuItemNotFound
from orders.services.ports import Catalog

from .models import MenuItem

logger = logging.getLogger(__name__)


def _parse_uuid(value):
    try:
        return uuid.UUID(str(value).strip())
    except (ValueError, AttributeError, TypeError):
        return None


class DjangoMenuCatalog(Catalog):
    """Catalog port over the MenuItem table. Reads only, never locks."""

    def lookup(self, item_id):
        pk = _parse_uuid(item_id)
        if pk is None:
            raise MenuItemNotFound(item_id)
        try:
            return MenuItem.objects.get(pk=pk)
        except MenuItem.DoesNotExist:
            raise MenuItemNotFound(item_id)

    def lookup_many(self, item_ids):
        parsed = {str(item_id): _parse_uuid(item_id) for item_id in item_ids}
        wanted = {pk for pk in parsed.values() if pk is not None}
        by_pk = MenuItem.objects.in_bulk(list(wanted)) if wanted else {}
        return {
            requested: by_pk[pk]
            for requested, pk in parsed.items()
            if pk is not None and pk in by_pk
        }


class MenuService:
    """Admin CRUD on the menu. Every change is announced on the global topic."""

    def __init__(self, notifier=None):
        if notifier is None:
            from notifications.services import notifier as default_notifier

            notifier = default_notifier
        self.notifier = notifier

    @transaction.atomic
    def create_item(self, **fields) -> MenuItem:
        item = MenuItem.objects.create(**fields)
        logger.info(f"Menu item created: {item.name} ({item.id})")
        self._announce(MenuItemCreated(menu_item=self._snapshot(item)))
        return item

    @transaction.atomic
    def update_item(self, item: MenuItem, **fields) -> MenuItem:
        for name, value in fields.items():
            setattr(item, name, value)
        item.save()
        logger.info(f"Menu item updated: {item.name} ({item.id})")
        self._announce(MenuItemUpdated(menu_item=self._snapshot(item)))
        return item

    @transaction.atomic
    def delete_item(self, item: MenuItem):
        """Existing orders keep their own snapshot of the item."""
        item_id = str(item.id)
        item.delete()
        logger.info(f"Menu item deleted: {item_id}")
        self._announce(MenuItemDeleted(id=item_id))

    def _announce(self, event):
        try:
            self.notifier.publish((Topic.GLOBAL,), event)
            self.notifier.publish((Topic.GLOBAL,), MenuRefresh())
        except Exception as e:
            logger.error(f"Error publishing {event.event_name}: {e}")

    @staticmethod
    def _snapshot(item):
        from .serializers import MenuItemSerializer

        return dict(MenuItemSerializer(item).data)
