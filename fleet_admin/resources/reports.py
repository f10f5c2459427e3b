# (c) Nelen & Schuurmans

from fleet_admin.base.domain import Filter
from fleet_admin.collection import Collection
from fleet_admin.collection import DateFields
from fleet_admin.collection import TIMESTAMPED

__all__ = ["ReportFilter", "reports"]


class ReportFilter(Filter):
    source_id: str = ""
    target_id: str = ""
    report_status: int | None = None
    deleted: bool = False


reports = Collection(
    "api/reports",
    identity_key="report_id",
    filter_model=ReportFilter,
    date_fields=DateFields(*TIMESTAMPED),
    sort_field="report_id",
    item_path="api/report/{id}",
    create_path="api/report",
)
