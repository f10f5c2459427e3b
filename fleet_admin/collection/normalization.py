# (c) Nelen & Schuurmans

from collections.abc import Iterable
from collections.abc import Sequence
from datetime import datetime
from datetime import timezone
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError

from fleet_admin.base.domain import Json

__all__ = ["DateFields", "parse_datetime", "TIMESTAMPED"]


# the created_on / updated_on pair that nearly every record carries
TIMESTAMPED = ("created_on", "updated_on")

_datetime_adapter = TypeAdapter(datetime)


def parse_datetime(value: Any) -> datetime | None:
    """Coerce an ISO 8601 string or unix epoch into an aware datetime.

    Returns None for anything that can't be parsed. Datetimes pass through,
    which makes repeated normalization a no-op.
    """
    if isinstance(value, datetime):
        result = value
    elif value is None or isinstance(value, bool) or value == "":
        return None
    elif isinstance(value, (str, int, float)):
        try:
            result = _datetime_adapter.validate_python(value)
        except ValidationError:
            return None
    else:
        return None
    if result.tzinfo is None:
        result = result.replace(tzinfo=timezone.utc)
    return result


class DateFields:
    """The fields of a record that hold points in time.

    Built from dotted paths, e.g. DateFields("created_on", "asset.created_on").
    A path runs through nested records and through lists of records alike.
    """

    def __init__(self, *paths: str):
        self._tree: dict[str, Any] = {}
        for path in paths:
            node = self._tree
            *parents, leaf = path.split(".")
            for name in parents:
                child = node.get(name)
                if child is None:
                    child = node[name] = {}
                node = child
            node.setdefault(leaf, None)
        self.paths = tuple(paths)

    def __bool__(self) -> bool:
        return bool(self._tree)

    def __repr__(self) -> str:
        return f"DateFields{self.paths!r}"

    def normalize(self, row: Json) -> Json:
        return _normalize(row, self._tree)

    def normalize_rows(self, rows: Iterable[Json]) -> list[Json]:
        return [self.normalize(row) for row in rows]


def _normalize(value: Any, tree: dict[str, Any]) -> Any:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return [_normalize(x, tree) for x in value]
    if not isinstance(value, dict):
        return value
    result = dict(value)
    for name, subtree in tree.items():
        if name not in result:
            continue
        if subtree is None:
            result[name] = parse_datetime(result[name])
        else:
            result[name] = _normalize(result[name], subtree)
    return result
