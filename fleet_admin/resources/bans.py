# (c) Nelen & Schuurmans

from fleet_admin.base.domain import Filter
from fleet_admin.collection import Collection
from fleet_admin.collection import DateFields
from fleet_admin.collection import TIMESTAMPED

__all__ = [
    "ASNBanFilter",
    "BanFilter",
    "CIDRBanFilter",
    "GroupBanFilter",
    "asn_bans",
    "cidr_bans",
    "group_bans",
    "steam_bans",
]

BAN_DATES = DateFields(*TIMESTAMPED, "valid_until")


class BanFilter(Filter):
    source_id: str = ""
    target_id: str = ""
    deleted: bool = False
    appeal_state: int | None = None


class CIDRBanFilter(Filter):
    source_id: str = ""
    target_id: str = ""
    deleted: bool = False
    ip: str = ""


class ASNBanFilter(Filter):
    source_id: str = ""
    target_id: str = ""
    deleted: bool = False
    as_num: int | None = None


class GroupBanFilter(Filter):
    source_id: str = ""
    target_id: str = ""
    deleted: bool = False
    group_id: str = ""


steam_bans = Collection(
    "api/bans/steam",
    identity_key="ban_id",
    filter_model=BanFilter,
    date_fields=BAN_DATES,
    sort_field="ban_id",
    item_path="api/bans/steam/{id}",
    create_path="api/bans/steam/create",
)

cidr_bans = Collection(
    "api/bans/cidr",
    identity_key="net_id",
    filter_model=CIDRBanFilter,
    date_fields=BAN_DATES,
    sort_field="net_id",
    item_path="api/bans/cidr/{id}",
    create_path="api/bans/cidr/create",
)

asn_bans = Collection(
    "api/bans/asn",
    identity_key="ban_asn_id",
    filter_model=ASNBanFilter,
    date_fields=BAN_DATES,
    sort_field="ban_asn_id",
    item_path="api/bans/asn/{id}",
    create_path="api/bans/asn/create",
)

group_bans = Collection(
    "api/bans/group",
    identity_key="ban_group_id",
    filter_model=GroupBanFilter,
    date_fields=BAN_DATES,
    sort_field="ban_group_id",
    item_path="api/bans/group/{id}",
    create_path="api/bans/group/create",
)
