import logging
from typing import Iterable

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.core.cache import cache
from django.db import transaction
from django.utils import timezone

from orders.services.ports import Notifier

from .events import group_name_for

logger = logging.getLogger(__name__)


class ChannelsNotifier(Notifier):
    """
    Publishes broadcast events to Channels groups.

    Inside a transaction the send is deferred until commit, so subscribers
    never see state that could still be rolled back. Failures are logged and
    dropped.
    """

    @property
    def channel_layer(self):
        return get_channel_layer()

    def publish(self, topics: Iterable[str], event):
        topics = tuple(dict.fromkeys(topics))
        try:
            if transaction.get_connection().in_atomic_block:
                transaction.on_commit(lambda: self._send(topics, event))
            else:
                self._send(topics, event)
        except Exception as e:
            logger.error(f"Error publishing {event.event_name}: {e}")

    def _send(self, topics, event):
        channel_layer = self.channel_layer
        if not channel_layer:
            logger.warning("No channel layer available for notifications")
            return

        try:
            payload = event.to_payload()
        except Exception as e:
            logger.error(f"Error serializing {event.event_name}: {e}")
            return

        for topic in topics:
            group_name = group_name_for(topic)
            try:
                logger.debug(f"Sending {event.event_name} to {topic} (group: {group_name})")
                async_to_sync(channel_layer.group_send)(
                    group_name,
                    {
                        "type": "broadcast.event",
                        "event": event.event_name,
                        "payload": payload,
                    },
                )
            except Exception as e:
                logger.error(f"Error sending {event.event_name} to {topic}: {e}")


notifier = ChannelsNotifier()


class PresenceTracker:
    """Online counters per staff role, kept in the Django cache."""

    KEY = "presence:{role}"

    @classmethod
    def _key(cls, role):
        return cls.KEY.format(role=role)

    @classmethod
    def joined(cls, role) -> int:
        key = cls._key(role)
        cache.add(key, 0, timeout=None)
        return cache.incr(key)

    @classmethod
    def left(cls, role) -> int:
        key = cls._key(role)
        try:
            count = cache.decr(key)
        except ValueError:
            count = 0
        if count < 0:
            cache.set(key, 0, timeout=None)
            count = 0
        return count

    @classmethod
    def count(cls, role) -> int:
        return cache.get(cls._key(role), 0) or 0


class CallLogService:
    """Bookkeeping for admin to kitchen calls."""

    HISTORY_LIMIT = 50

    @staticmethod
    def history(limit=HISTORY_LIMIT):
        from .models import CallSession

        return CallSession.objects.select_related("admin", "kitchen_staff").order_by("-start_time")[:limit]

    @staticmethod
    @transaction.atomic
    def start_call(admin, kitchen_staff=None):
        from .models import CallSession

        call = CallSession.objects.create(admin=admin, kitchen_staff=kitchen_staff)
        logger.info(f"Call {call.id} started by {admin.email}")
        return call

    @staticmethod
    @transaction.atomic
    def end_call(call_id, status=None):
        """
        Stamp the end of a call. Calls that were never answered become `missed`
        unless a status is given explicitly.
        """
        from .models import CallSession

        call = CallSession.objects.select_for_update().get(pk=call_id)
        if call.status != CallSession.Status.ONGOING:
            return call

        call.end_time = timezone.now()
        call.duration = max(int((call.end_time - call.start_time).total_seconds()), 0)
        if status:
            call.status = status
        else:
            call.status = CallSession.Status.COMPLETED if call.kitchen_staff_id else CallSession.Status.MISSED
        call.save(update_fields=["end_time", "duration", "status"])
        logger.info(f"Call {call.id} ended ({call.status}, {call.duration}s)")
        return call
