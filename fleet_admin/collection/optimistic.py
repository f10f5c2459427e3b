from collections.abc import Iterable
from collections.abc import Iterator

from fleet_admin.base.domain import Json

__all__ = ["OptimisticRowSet"]


class OptimisticRowSet:
    """Rows created on the client that a fetch did not return yet.

    They are shown ahead of the fetched rows until a fetch contains a row
    with the same identity key.
    """

    def __init__(self, identity_key: str):
        self.identity_key = identity_key
        self._rows: list[Json] = []

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Json]:
        return iter(self._rows)

    def add(self, row: Json) -> None:
        key = row[self.identity_key]
        # newest first; a re-added key replaces the older entry
        self._rows = [row] + [x for x in self._rows if x[self.identity_key] != key]

    def reconcile(self, fetched: Iterable[Json]) -> None:
        """Drop the entries that are present in `fetched`."""
        seen = {row.get(self.identity_key) for row in fetched}
        self._rows = [x for x in self._rows if x[self.identity_key] not in seen]

    def merge(self, fetched: Iterable[Json]) -> list[Json]:
        return [*self._rows, *fetched]

    def clear(self) -> None:
        self._rows = []
