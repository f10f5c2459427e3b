# (c) Nelen & Schuurmans

from fleet_admin.base.domain import Filter
from fleet_admin.base.domain import Range
from fleet_admin.collection import Collection
from fleet_admin.collection import DateFields
from fleet_admin.collection import TIMESTAMPED

__all__ = [
    "ConnectionFilter",
    "MessageFilter",
    "PeopleFilter",
    "connections",
    "messages",
    "people",
]


class PeopleFilter(Filter):
    steam_id: str = ""
    personaname: str = ""
    ip: str = ""
    deleted: bool = False


class MessageFilter(Filter):
    source_id: str = ""
    personaname: str = ""
    query: str = ""
    server_id: int | None = None
    created_on: Range | None = None
    deleted: bool = False


class ConnectionFilter(Filter):
    source_id: str = ""
    cidr: str = ""
    asn: int | None = None


people = Collection(
    "api/players",
    identity_key="steam_id",
    filter_model=PeopleFilter,
    # timecreated is the steam account creation time as a unix epoch
    date_fields=DateFields(*TIMESTAMPED, "updated_on_steam", "timecreated"),
    item_path="api/player/{id}",
)

messages = Collection(
    "api/messages",
    identity_key="person_message_id",
    filter_model=MessageFilter,
    date_fields=DateFields("created_on"),
)

connections = Collection(
    "api/connections",
    identity_key="person_connection_id",
    filter_model=ConnectionFilter,
    date_fields=DateFields("created_on"),
)
