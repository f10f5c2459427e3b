# (c) Nelen & Schuurmans

from fleet_admin.base.domain import Filter
from fleet_admin.collection import Collection
from fleet_admin.collection import DateFields
from fleet_admin.collection import TIMESTAMPED

__all__ = ["ContestEntryFilter", "ContestFilter", "contest_entries", "contests"]


class ContestFilter(Filter):
    deleted: bool = False


class ContestEntryFilter(Filter):
    pass


contests = Collection(
    "api/contests",
    identity_key="contest_id",
    filter_model=ContestFilter,
    date_fields=DateFields(*TIMESTAMPED, "date_start", "date_end"),
    item_path="api/contests/{id}",
    create_path="api/contests",
    method="GET",
)

# this endpoint returns a bare list instead of {"data": ..., "count": ...}
contest_entries = Collection(
    "api/contests/{contest_id}/entries",
    identity_key="contest_entry_id",
    filter_model=ContestEntryFilter,
    date_fields=DateFields(*TIMESTAMPED, "asset.created_on", "asset.updated_on"),
    item_path="api/contest_entry/{id}",
    create_path="api/contests/{contest_id}/submit",
    method="GET",
)
