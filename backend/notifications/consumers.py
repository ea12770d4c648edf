"""
Staff websocket: broadcast fan-out plus the admin/kitchen call signaling relay.

Client messages are JSON objects with a `type`; everything sent back to the
client is `{"type": <event name>, "data": {...}}`.
"""
import json
import logging

from asgiref.sync import sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.utils import timezone

from .events import Topic, group_name_for
from .services import PresenceTracker

logger = logging.getLogger(__name__)

CLOSE_UNAUTHENTICATED = 4001
CLOSE_NOT_APPROVED = 4003

ROLE_ADMIN = "admin"
ROLE_KITCHEN = "kitchen"


def now_ms() -> int:
    return int(timezone.now().timestamp() * 1000)


class StaffConsumer(AsyncWebsocketConsumer):
    """One connection per admin or kitchen screen."""

    async def connect(self):
        self.role = None
        self.groups_joined = set()

        user = self.scope.get("user")
        if not getattr(user, "is_authenticated", False):
            logger.warning("Rejected staff websocket: not authenticated")
            await self.close(code=CLOSE_UNAUTHENTICATED)
            return

        if getattr(user, "is_admin_role", False):
            self.role = ROLE_ADMIN
        elif getattr(user, "is_kitchen_staff", False):
            self.role = ROLE_KITCHEN
        else:
            logger.warning(f"Rejected staff websocket for {user.email}: not approved")
            await self.close(code=CLOSE_NOT_APPROVED)
            return

        await self.accept()
        await self.join_group(self.role)
        await self.join_group(Topic.GLOBAL)
        if self.role == ROLE_KITCHEN:
            await sync_to_async(PresenceTracker.joined)(ROLE_KITCHEN)

        logger.info(f"Staff websocket connected: user={user.email}, role={self.role}")

    async def disconnect(self, close_code):
        if self.role is None:
            return

        user = self.scope.get("user")
        if self.role == ROLE_ADMIN:
            await self.relay_to_group(
                ROLE_KITCHEN, "kitchen:call-ended", {"reason": "admin_disconnected"}
            )
        elif self.role == ROLE_KITCHEN:
            await sync_to_async(PresenceTracker.left)(ROLE_KITCHEN)
            await self.relay_to_group(
                ROLE_ADMIN,
                "kitchen:disconnected",
                {"kitchenName": self.display_name(user), "kitchenEmail": getattr(user, "email", "")},
            )

        for group_name in list(self.groups_joined):
            await self.channel_layer.group_discard(group_name, self.channel_name)
        self.groups_joined.clear()

        logger.info(f"Staff websocket disconnected: role={self.role}, code={close_code}")

    async def receive(self, text_data=None, bytes_data=None):
        try:
            data = json.loads(text_data or "")
        except json.JSONDecodeError:
            await self.send_event("error", {"message": "Invalid JSON format"})
            return

        if not isinstance(data, dict):
            await self.send_event("error", {"message": "Messages must be JSON objects"})
            return

        message_type = data.get("type")
        handler = self.HANDLERS.get(message_type)
        if handler is None:
            await self.send_event("error", {"message": f"Unknown message type: {message_type}"})
            return

        if message_type.startswith("admin:") and self.role != ROLE_ADMIN:
            await self.send_event("error", {"message": f"{message_type} is only available to admins"})
            return
        if message_type.startswith("kitchen:") and self.role != ROLE_KITCHEN:
            await self.send_event("error", {"message": f"{message_type} is only available to kitchen staff"})
            return

        logger.debug(f"Staff websocket message {message_type} from {self.channel_name}")
        await handler(self, data)

    # --- Group membership ---

    async def join_group(self, topic):
        group_name = group_name_for(topic)
        await self.channel_layer.group_add(group_name, self.channel_name)
        self.groups_joined.add(group_name)
        return group_name

    async def handle_join_role(self, data):
        role = str(data.get("role") or "").strip()
        if not role:
            await self.send_event("error", {"message": "role is required"})
            return
        # Kitchen screens may not subscribe to admin-only traffic.
        if self.role != ROLE_ADMIN and role not in (self.role, Topic.GLOBAL):
            await self.send_event("error", {"message": f"Cannot join room {role}"})
            return

        await self.join_group(role)
        payload = {"room": role}
        if role == ROLE_KITCHEN:
            payload["members"] = await sync_to_async(PresenceTracker.count)(ROLE_KITCHEN)
        await self.send_event("room:joined", payload)

    async def handle_join_table(self, data):
        table = data.get("table", data.get("tableNumber"))
        if table in (None, ""):
            await self.send_event("error", {"message": "table is required"})
            return
        room = Topic.table(table)
        await self.join_group(room)
        await self.send_event("room:joined", {"room": room})

    # --- Call signaling ---

    async def handle_call_kitchen(self, data):
        members = await sync_to_async(PresenceTracker.count)(ROLE_KITCHEN)
        logger.info(f"Admin calling kitchen ({members} staff online)")
        if members == 0:
            await self.send_event("call:error", {"message": "No kitchen staff online"})
            await self.send_event("call:no-kitchen-available", {})
            return

        user = self.scope["user"]
        await self.relay_to_group(
            ROLE_KITCHEN,
            "kitchen:incoming-call",
            {
                "from": self.channel_name,
                "adminEmail": user.email,
                "adminName": self.display_name(user),
                "offer": data.get("offer"),
            },
        )

    async def handle_answer_call(self, data):
        user = self.scope["user"]
        await self.relay_to_channel(
            data.get("to"),
            "admin:call-answered",
            {
                "answer": data.get("answer"),
                "kitchenName": self.display_name(user),
                "kitchenEmail": user.email,
                "from": self.channel_name,
            },
        )

    async def handle_admin_end_call(self, data):
        await self.relay_to_group(ROLE_KITCHEN, "kitchen:call-ended", {"reason": "admin_ended"})
        if data.get("to"):
            await self.relay_to_channel(data["to"], "kitchen:call-ended", {"reason": "admin_ended"})

    async def handle_kitchen_end_call(self, data):
        if data.get("to"):
            await self.relay_to_channel(data["to"], "admin:call-ended", {"reason": "kitchen_ended"})
        await self.relay_to_group(
            ROLE_ADMIN,
            "kitchen:call-ended",
            {"reason": "kitchen_ended", "kitchenName": self.display_name(self.scope["user"])},
        )

    async def handle_ice_candidate(self, data):
        if data.get("to") and data.get("candidate"):
            await self.relay_to_channel(
                data["to"],
                "ice-candidate",
                {"candidate": data["candidate"], "from": self.channel_name},
            )

    async def handle_mute_kitchen(self, data):
        await self.relay_to_group(ROLE_KITCHEN, "kitchen:muted", {})

    async def handle_unmute_kitchen(self, data):
        await self.relay_to_group(ROLE_KITCHEN, "kitchen:unmuted", {})

    async def handle_toggle_kitchen_video(self, data):
        await self.relay_to_group(
            ROLE_KITCHEN, "kitchen:video-toggled", {"enabled": bool(data.get("enabled"))}
        )

    async def handle_check_availability(self, data):
        members = await sync_to_async(PresenceTracker.count)(ROLE_KITCHEN)
        await self.send_event(
            "kitchen:availability",
            {"available": members > 0, "members": members, "timestamp": now_ms()},
        )

    async def handle_ping(self, data):
        await self.send_event("pong", {"timestamp": now_ms()})

    HANDLERS = {
        "joinRole": handle_join_role,
        "joinTable": handle_join_table,
        "admin:call-kitchen": handle_call_kitchen,
        "kitchen:answer-call": handle_answer_call,
        "admin:end-call": handle_admin_end_call,
        "kitchen:end-call": handle_kitchen_end_call,
        "ice-candidate": handle_ice_candidate,
        "admin:mute-kitchen": handle_mute_kitchen,
        "admin:unmute-kitchen": handle_unmute_kitchen,
        "admin:toggle-kitchen-video": handle_toggle_kitchen_video,
        "admin:check-kitchen-availability": handle_check_availability,
        "ping": handle_ping,
    }

    # --- Outbound ---

    async def relay_to_group(self, topic, event, payload):
        payload = dict(payload, timestamp=now_ms())
        await self.channel_layer.group_send(
            group_name_for(topic),
            {"type": "broadcast.event", "event": event, "payload": payload},
        )

    async def relay_to_channel(self, channel_name, event, payload):
        if not channel_name or not isinstance(channel_name, str):
            await self.send_event("error", {"message": "A target connection is required"})
            return
        payload = dict(payload, timestamp=now_ms())
        try:
            await self.channel_layer.send(
                channel_name,
                {"type": "broadcast.event", "event": event, "payload": payload},
            )
        except (TypeError, ValueError) as e:
            logger.warning(f"Could not relay {event} to {channel_name}: {e}")
            await self.send_event("error", {"message": "Unknown target connection"})

    async def broadcast_event(self, event):
        """Group and direct messages from the channel layer."""
        await self.send_event(event["event"], event.get("payload", {}))

    async def send_event(self, event, payload):
        await self.send(text_data=json.dumps({"type": event, "data": payload}))

    @staticmethod
    def display_name(user):
        return getattr(user, "display_name", None) or getattr(user, "email", "")
