"""
Broadcast event vocabulary.

Every real-time message is one frozen dataclass with a fixed `event_name`, so
consumers always receive the same payload shape for a given name.
"""
import json
from dataclasses import asdict, dataclass
from typing import ClassVar

from django.core.serializers.json import DjangoJSONEncoder


class Topic:
    KITCHEN = "kitchen"
    ADMIN = "admin"
    GLOBAL = "global"

    STAFF = (KITCHEN, ADMIN, GLOBAL)

    @staticmethod
    def table(number) -> str:
        return f"table:{number}"


def group_name_for(topic: str) -> str:
    """Channels group names only allow ASCII alphanumerics, hyphens, underscores and periods."""
    return "".join(c if c.isascii() and (c.isalnum() or c in "-_.") else "_" for c in topic)


@dataclass(frozen=True)
class BroadcastEvent:
    event_name: ClassVar[str] = ""

    def to_payload(self) -> dict:
        # Round-trip through JSON so Decimal, datetime and UUID values survive
        # any channel layer serializer.
        return json.loads(json.dumps(asdict(self), cls=DjangoJSONEncoder))


@dataclass(frozen=True)
class MenuItemCreated(BroadcastEvent):
    event_name: ClassVar[str] = "menu:new"

    menu_item: dict


@dataclass(frozen=True)
class MenuItemUpdated(BroadcastEvent):
    event_name: ClassVar[str] = "menu:update"

    menu_item: dict


@dataclass(frozen=True)
class MenuItemDeleted(BroadcastEvent):
    event_name: ClassVar[str] = "menu:delete"

    id: str


@dataclass(frozen=True)
class MenuRefresh(BroadcastEvent):
    event_name: ClassVar[str] = "menu:refresh"
