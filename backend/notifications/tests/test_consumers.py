"""
Staff WebSocket Tests

Connection gating, room membership, broadcast fan-out and the admin/kitchen
call signaling relay. Users are built in memory and placed on the scope, so
these tests never touch the database.
"""
import threading

import pytest
from asgiref.sync import sync_to_async
from channels.testing import WebsocketCommunicator

from notifications.consumers import CLOSE_NOT_APPROVED, CLOSE_UNAUTHENTICATED
from notifications.events import MenuRefresh, Topic
from notifications.services import ChannelsNotifier, PresenceTracker
from orders.events import OrderDeleted
from pos_backend.asgi import application
from users.models import User

# channels >= 4.2 closes stale DB connections on every consumer dispatch.
pytestmark = pytest.mark.django_db(transaction=True)

WS_PATH = "/ws/staff/"


def staff_user(email, role, approved=True):
    return User(email=email, name=email.split("@")[0].title(), role=role, is_approved=approved)


async def connect_as(user):
    communicator = WebsocketCommunicator(application, WS_PATH)
    communicator.scope["user"] = user
    connected, code = await communicator.connect()
    return communicator, connected, code


@pytest.fixture
def admin():
    return staff_user("boss@example.com", User.Role.ADMIN)


@pytest.fixture
def cook():
    return staff_user("cook@example.com", User.Role.KITCHEN)


@pytest.mark.asyncio
class TestStaffConnection:
    async def test_anonymous_is_closed(self):
        communicator = WebsocketCommunicator(application, WS_PATH)

        connected, code = await communicator.connect()

        assert connected is False
        assert code == CLOSE_UNAUTHENTICATED

    async def test_unapproved_kitchen_is_closed(self):
        _, connected, code = await connect_as(
            staff_user("new@example.com", User.Role.KITCHEN, approved=False)
        )

        assert connected is False
        assert code == CLOSE_NOT_APPROVED

    async def test_ping(self, admin):
        communicator, connected, _ = await connect_as(admin)
        assert connected

        await communicator.send_json_to({"type": "ping"})
        response = await communicator.receive_json_from()

        assert response["type"] == "pong"
        assert isinstance(response["data"]["timestamp"], int)
        await communicator.disconnect()

    async def test_invalid_messages(self, admin):
        communicator, _, _ = await connect_as(admin)

        await communicator.send_to(text_data="{not json")
        assert (await communicator.receive_json_from())["type"] == "error"

        await communicator.send_json_to({"type": "dance"})
        response = await communicator.receive_json_from()
        assert response["data"]["message"] == "Unknown message type: dance"
        await communicator.disconnect()

    async def test_kitchen_presence_is_counted(self, cook):
        communicator, _, _ = await connect_as(cook)
        assert PresenceTracker.count("kitchen") == 1

        await communicator.disconnect()
        assert PresenceTracker.count("kitchen") == 0

    async def test_presence_updates_run_off_the_event_loop(self, cook, monkeypatch):
        """Cache-backed counters may hit Redis, so they run in a worker thread."""
        threads = []

        def joined(role):
            threads.append(threading.get_ident())
            return 1

        monkeypatch.setattr(PresenceTracker, "joined", staticmethod(joined))

        communicator, connected, _ = await connect_as(cook)

        assert connected
        assert threads and threads[0] != threading.get_ident()
        await communicator.disconnect()


@pytest.mark.asyncio
class TestRooms:
    async def test_join_table_receives_table_events(self, cook):
        communicator, _, _ = await connect_as(cook)
        await communicator.send_json_to({"type": "joinTable", "table": 4})
        assert await communicator.receive_json_from() == {"type": "room:joined", "data": {"room": "table:4"}}

        notifier = ChannelsNotifier()
        await sync_to_async(notifier.publish)([Topic.table(4)], OrderDeleted(id="abc", table_numbers=[4]))

        message = await communicator.receive_json_from()
        assert message == {"type": "order:delete", "data": {"id": "abc", "table_numbers": [4]}}
        await communicator.disconnect()

    async def test_global_events_reach_everyone(self, admin, cook):
        boss, _, _ = await connect_as(admin)
        kitchen, _, _ = await connect_as(cook)

        await sync_to_async(ChannelsNotifier().publish)([Topic.GLOBAL], MenuRefresh())

        assert (await boss.receive_json_from())["type"] == "menu:refresh"
        assert (await kitchen.receive_json_from())["type"] == "menu:refresh"
        await boss.disconnect()
        await kitchen.disconnect()

    async def test_kitchen_cannot_join_admin_room(self, cook):
        communicator, _, _ = await connect_as(cook)

        await communicator.send_json_to({"type": "joinRole", "role": "admin"})

        response = await communicator.receive_json_from()
        assert response["type"] == "error"
        await communicator.disconnect()

    async def test_admin_joining_kitchen_room_sees_member_count(self, admin, cook):
        kitchen, _, _ = await connect_as(cook)
        boss, _, _ = await connect_as(admin)

        await boss.send_json_to({"type": "joinRole", "role": "kitchen"})

        assert await boss.receive_json_from() == {
            "type": "room:joined",
            "data": {"room": "kitchen", "members": 1},
        }
        await kitchen.disconnect()
        await boss.disconnect()


@pytest.mark.asyncio
class TestCallSignaling:
    async def test_call_without_kitchen_online(self, admin):
        communicator, _, _ = await connect_as(admin)

        await communicator.send_json_to({"type": "admin:call-kitchen", "offer": {"sdp": "x"}})

        assert (await communicator.receive_json_from())["type"] == "call:error"
        assert (await communicator.receive_json_from())["type"] == "call:no-kitchen-available"
        await communicator.disconnect()

    async def test_offer_and_answer_are_relayed(self, admin, cook):
        kitchen, _, _ = await connect_as(cook)
        boss, _, _ = await connect_as(admin)

        await boss.send_json_to({"type": "admin:check-kitchen-availability"})
        availability = await boss.receive_json_from()
        assert availability["data"]["available"] is True

        await boss.send_json_to({"type": "admin:call-kitchen", "offer": {"sdp": "offer"}})
        incoming = await kitchen.receive_json_from()
        assert incoming["type"] == "kitchen:incoming-call"
        assert incoming["data"]["offer"] == {"sdp": "offer"}
        assert incoming["data"]["adminEmail"] == "boss@example.com"

        await kitchen.send_json_to(
            {"type": "kitchen:answer-call", "to": incoming["data"]["from"], "answer": {"sdp": "answer"}}
        )
        answered = await boss.receive_json_from()
        assert answered["type"] == "admin:call-answered"
        assert answered["data"]["answer"] == {"sdp": "answer"}
        assert answered["data"]["kitchenEmail"] == "cook@example.com"

        await kitchen.disconnect()
        await boss.disconnect()

    async def test_role_prefixed_messages_are_restricted(self, cook):
        communicator, _, _ = await connect_as(cook)

        await communicator.send_json_to({"type": "admin:mute-kitchen"})

        response = await communicator.receive_json_from()
        assert response["type"] == "error"
        assert "only available to admins" in response["data"]["message"]
        await communicator.disconnect()

    async def test_admin_mute_reaches_kitchen(self, admin, cook):
        kitchen, _, _ = await connect_as(cook)
        boss, _, _ = await connect_as(admin)

        await boss.send_json_to({"type": "admin:mute-kitchen"})

        assert (await kitchen.receive_json_from())["type"] == "kitchen:muted"
        await kitchen.disconnect()
        await boss.disconnect()

    async def test_kitchen_disconnect_notifies_admin(self, admin, cook):
        boss, _, _ = await connect_as(admin)
        kitchen, _, _ = await connect_as(cook)

        await kitchen.disconnect()

        message = await boss.receive_json_from()
        assert message["type"] == "kitchen:disconnected"
        assert message["data"]["kitchenEmail"] == "cook@example.com"
        await boss.disconnect()

    async def test_admin_disconnect_ends_kitchen_call(self, admin, cook):
        kitchen, _, _ = await connect_as(cook)
        boss, _, _ = await connect_as(admin)

        await boss.disconnect()

        message = await kitchen.receive_json_from()
        assert message["type"] == "kitchen:call-ended"
        assert message["data"]["reason"] == "admin_disconnected"
        await kitchen.disconnect()
