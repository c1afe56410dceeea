"""Record payloads, their default indices and typed scroll pages."""

from typing import Any, ClassVar, Generic, Mapping, TypeVar

from pydantic import BaseModel

from elasticwrap.exceptions import UnmappedRecordTypeError


class Record(BaseModel):
    """Base class for payloads stored in the cluster.

    The facade only relies on `id`, which becomes the document `_id`. Every
    other field is caller owned and passes through unvalidated by elasticwrap.
    Subclasses may set `record_type` to the tag used in `record_indices`;
    it falls back to the class name.
    """

    record_type: ClassVar[str | None] = None

    id: str

    @classmethod
    def type_tag(cls) -> str:
        """Return the tag used to look up this record type's default index."""
        return cls.__dict__.get("record_type") or cls.__name__

    def to_document(self) -> dict[str, Any]:
        """Return the JSON-compatible body sent to the cluster."""
        return self.model_dump(mode="json")


RecordT = TypeVar("RecordT", bound=Record)


class RecordIndexMap:
    """Mapping of record-type tags to their default index names."""

    def __init__(self, indices: Mapping[str, str] | None = None) -> None:
        self._indices: dict[str, str] = dict(indices or {})

    def register(self, record_type: str, index_name: str) -> None:
        """Add or replace the default index for a record type."""
        self._indices[record_type] = index_name

    def get(self, record_type: str) -> str | None:
        """Return the default index for a record type, if any."""
        return self._indices.get(record_type)

    def resolve(self, record_type: str, index_name: str | None = None) -> str:
        """Return `index_name` when given, else the record type's default index.

        Raises:
            UnmappedRecordTypeError: If no index name was given and the record
                type has no default.
        """
        if index_name:
            return index_name
        default = self._indices.get(record_type)
        if not default:
            raise UnmappedRecordTypeError(record_type)
        return default

    def __contains__(self, record_type: object) -> bool:
        return record_type in self._indices

    def __len__(self) -> int:
        return len(self._indices)


class ScrollPage(BaseModel, Generic[RecordT]):
    """One page of a full-index scan."""

    scroll_id: str | None = None
    total: int = 0
    records: list[RecordT] = []

    @property
    def is_empty(self) -> bool:
        """Return True when the page holds no records, which ends a scan."""
        return not self.records

    @classmethod
    def from_response(
        cls, record_cls: type[RecordT], response: Mapping[str, Any]
    ) -> "ScrollPage[RecordT]":
        """Build a page from a raw `search` or `scroll` response."""
        response = dict(response)
        hits = response.get("hits", {})
        total = hits.get("total", 0)
        # Clusters report either a bare integer or {"value": n, "relation": ...}.
        if isinstance(total, Mapping):
            total = total.get("value", 0)

        # The hit's `_id` is authoritative over any `id` kept in `_source`.
        records = [
            record_cls.model_validate({**hit.get("_source", {}), "id": hit.get("_id")})
            for hit in hits.get("hits", [])
        ]
        return cls(scroll_id=response.get("_scroll_id"), total=total, records=records)
