# (c) Nelen & Schuurmans

from fleet_admin.base.domain import Filter
from fleet_admin.collection import Collection
from fleet_admin.collection import DateFields
from fleet_admin.collection import TIMESTAMPED

__all__ = ["ServerFilter", "WordFilterFilter", "servers", "word_filters"]


class ServerFilter(Filter):
    deleted: bool = False
    include_disabled: bool = True


class WordFilterFilter(Filter):
    deleted: bool = False


servers = Collection(
    "api/servers_admin",
    identity_key="server_id",
    filter_model=ServerFilter,
    date_fields=DateFields(*TIMESTAMPED),
    sort_field="short_name",
    item_path="api/servers/{id}",
    create_path="api/servers",
)

word_filters = Collection(
    "api/filters/query",
    identity_key="filter_id",
    filter_model=WordFilterFilter,
    date_fields=DateFields(*TIMESTAMPED),
    sort_field="filter_id",
    item_path="api/filters/{id}",
    create_path="api/filters",
)
