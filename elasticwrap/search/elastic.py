"""Elasticsearch service utilities."""

import logging
import threading
import uuid
from typing import Any, Iterator, Mapping, Sequence, cast

from elasticsearch import ApiError, Elasticsearch, TransportError

from elasticwrap.configs import settings
from elasticwrap.records import Record, RecordIndexMap, RecordT, ScrollPage

logger = logging.getLogger(__name__)

MATCH_ALL: dict[str, Any] = {"match_all": {}}


class ElasticSearchAdapter:
    """A wrapper around the Elasticsearch Python client.

    Instances are configured with a URL and lazily create the underlying
    Elasticsearch client on first use. Creation is guarded by a lock so that
    concurrent first callers share a single client. A cluster health check runs
    right after creation; its outcome is reported by `is_connected()` and a
    failure is logged rather than raised.

    Records are routed to the index given by the caller or, when omitted, to the
    default index of their record type.
    """

    def __init__(
        self,
        *,
        url: str,
        api_key: str = "",
        max_retries: int = 3,
        retry_on_timeout: bool = True,
        request_timeout_sec: float = 30.0,
        scroll_ttl: str = "3m",
        page_size_per_shard: int = 500,
        record_indices: RecordIndexMap | Mapping[str, str] | None = None,
    ) -> None:
        self._url = url
        self._api_key = api_key
        self._max_retries = max_retries
        self._retry_on_timeout = retry_on_timeout
        self._request_timeout_sec = request_timeout_sec
        self.scroll_ttl = scroll_ttl
        self.page_size_per_shard = page_size_per_shard
        self.record_indices = (
            record_indices
            if isinstance(record_indices, RecordIndexMap)
            else RecordIndexMap(record_indices)
        )
        self._client: Elasticsearch | None = None
        self._client_lock = threading.Lock()
        self._connected = False

    @classmethod
    def from_settings(cls, config: Any = settings) -> "ElasticSearchAdapter":
        """Build an adapter from the `elasticsearch`, `scroll` and `record_indices` settings."""
        return cls(
            url=config.elasticsearch.url,
            api_key=config.elasticsearch.api_key,
            max_retries=config.elasticsearch.max_retries,
            retry_on_timeout=config.elasticsearch.retry_on_timeout,
            request_timeout_sec=config.elasticsearch.request_timeout_sec,
            scroll_ttl=config.scroll.ttl,
            page_size_per_shard=config.scroll.page_size_per_shard,
            record_indices=dict(config.get("record_indices") or {}),
        )

    def create_client(self) -> Elasticsearch:
        """Create a new Elasticsearch client instance."""
        return Elasticsearch(
            self._url,
            api_key=self._api_key or None,
            max_retries=self._max_retries,
            retry_on_timeout=self._retry_on_timeout,
            request_timeout=self._request_timeout_sec,
        )

    def get_client(self) -> Elasticsearch:
        """Return the underlying Elasticsearch client, creating it if needed.

        The client is created once and cached on the adapter instance.
        """
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    client = self.create_client()
                    self._connected = self._check_health(client)
                    self._client = client
        return self._client

    def _check_health(self, client: Elasticsearch) -> bool:
        try:
            health = client.cluster.health()
        except (ApiError, TransportError) as e:
            logger.error(
                "Connection to Elasticsearch failed",
                extra={"url": self._url, "error": repr(e)},
            )
            return False
        logger.info(
            "Connected to Elasticsearch",
            extra={
                "url": self._url,
                "cluster_name": health["cluster_name"],
                "status": health["status"],
            },
        )
        return True

    def is_connected(self) -> bool:
        """Return True once the cluster health check has succeeded."""
        return self._connected

    @staticmethod
    def new_unique_index_suffix(base_index_name: str) -> str:
        """Return `base_index_name` with a unique suffix appended."""
        return f"{base_index_name}_{uuid.uuid4()}"

    # Index management

    def index(self, record: Record, index_name: str | None = None) -> dict[str, Any]:
        """Index a record, replacing any document that has the same id.

        The record goes to `index_name` when given, otherwise to the default
        index of its record type.
        """
        index = self.record_indices.resolve(record.type_tag(), index_name)
        return cast(
            dict[str, Any],
            self.get_client().index(index=index, id=record.id, document=record.to_document()),
        )

    def index_by_put_if_absent(
        self, record: Record, index_name: str | None = None
    ) -> dict[str, Any]:
        """Index a record only if no document with its id exists yet.

        This makes indexing idempotent, which is useful when building a new
        index from scratch. An existing document is left unchanged and the
        cluster's `ConflictError` propagates to the caller.
        """
        index = self.record_indices.resolve(record.type_tag(), index_name)
        return cast(
            dict[str, Any],
            self.get_client().index(
                index=index,
                id=record.id,
                document=record.to_document(),
                op_type="create",
            ),
        )

    def index_exists(self, *, index: str) -> bool:
        """Return True if the index exists."""
        return bool(self.get_client().indices.exists(index=index))

    def create_index(
        self,
        *,
        index: str,
        mappings: dict[str, Any] | None = None,
        settings: dict[str, Any] | None = None,
        aliases: dict[str, Any] | None = None,
        wait_for_active_shards: str | int = "1",
    ) -> bool:
        """Create an index and return whether the operation was acknowledged.

        Note: This does not check for existence. Call `index_exists()` if needed.
        """
        res = self.get_client().indices.create(
            index=index,
            mappings=mappings,
            settings=settings,
            aliases=aliases,
            wait_for_active_shards=wait_for_active_shards,
        )
        return bool(res.get("acknowledged", False))

    def refresh_index(self, *, index: str) -> None:
        """Refresh an index to make recent operations visible to search."""
        self.get_client().indices.refresh(index=index)

    # Search and scroll management

    def search(
        self, record_cls: type[RecordT], index_name: str | None = None
    ) -> ScrollPage[RecordT]:
        """Start a scan over every document of an index.

        Hits come back in index order without scoring. Each page holds up to
        `page_size_per_shard` hits in total, across all shards, and the cursor
        stays alive for `scroll_ttl` between calls.
        """
        index = self.record_indices.resolve(record_cls.type_tag(), index_name)
        res = self.get_client().search(
            index=index,
            query=MATCH_ALL,
            size=self.page_size_per_shard,
            sort=["_doc"],
            scroll=self.scroll_ttl,
        )
        return ScrollPage.from_response(record_cls, res)

    def scroll(self, record_cls: type[RecordT], scroll_id: str) -> ScrollPage[RecordT]:
        """Fetch the next page of a scan started by `search()`.

        An expired cursor surfaces as the cluster's `NotFoundError`.
        """
        res = self.get_client().scroll(scroll_id=scroll_id, scroll=self.scroll_ttl)
        return ScrollPage.from_response(record_cls, res)

    def clear_scroll(self, scroll_id: str) -> None:
        """Release a scroll cursor. Cursors that already expired are ignored."""
        self.get_client().options(ignore_status=404).clear_scroll(scroll_id=scroll_id)

    def scan(self, record_cls: type[RecordT], index_name: str | None = None) -> Iterator[RecordT]:
        """Yield every record of an index, one scroll page at a time."""
        page = self.search(record_cls, index_name)
        scroll_id = page.scroll_id
        try:
            while not page.is_empty:
                yield from page.records
                if scroll_id is None:
                    break
                page = self.scroll(record_cls, scroll_id)
                scroll_id = page.scroll_id or scroll_id
        finally:
            if scroll_id is not None:
                self.clear_scroll(scroll_id)

    # Alias management

    def get_aliases(self, index_name: str) -> list[str]:
        """Return the names of the aliases pointing at an index."""
        res = self.get_client().indices.get_alias(index=index_name)
        return sorted({alias for name in res for alias in res[name].get("aliases", {})})

    def create_alias(self, alias_name: str, index_name: str) -> None:
        """Point an alias at an index. Either one may be new."""
        self.update_aliases(actions=[{"add": {"index": index_name, "alias": alias_name}}])

    def delete_alias(self, alias_name: str, index_name: str) -> None:
        """Remove an alias from an index, leaving the index itself in place."""
        self.update_aliases(actions=[{"remove": {"index": index_name, "alias": alias_name}}])

    def reroute_alias(self, alias_name: str, old_index_name: str, new_index_name: str) -> None:
        """Move an alias from one index to another.

        The add and the remove are sent as one request so the cluster applies
        them together.
        """
        logger.info(
            "Rerouting alias",
            extra={"alias": alias_name, "old_index": old_index_name, "new_index": new_index_name},
        )
        self.update_aliases(
            actions=[
                {"add": {"index": new_index_name, "alias": alias_name}},
                {"remove": {"index": old_index_name, "alias": alias_name}},
            ]
        )

    def alias_exists(self, *, alias: str) -> bool:
        """Return True if the alias exists."""
        return bool(self.get_client().indices.exists_alias(name=alias))

    def get_indices_for_alias(self, *, alias: str) -> list[str]:
        """Return a list of index names currently associated with an alias."""
        indices = cast(dict[str, Any], self.get_client().indices.get_alias(name=alias))
        return list(indices.keys())

    def update_aliases(self, *, actions: Sequence[Mapping[str, Any]]) -> None:
        """Apply alias update actions atomically."""
        self.get_client().indices.update_aliases(actions=actions)

    # Deletion management

    def delete_by_id(self, record_cls: type[Record], record_id: str | int) -> bool:
        """Delete a document from the record type's default index.

        Returns False instead of raising when the cluster reports an error, a
        missing document included. The error itself is only logged.
        """
        index = self.record_indices.resolve(record_cls.type_tag())
        try:
            self.get_client().delete(index=index, id=str(record_id))
        except (ApiError, TransportError) as e:
            logger.warning(
                "Failed to delete document",
                extra={"index": index, "id": str(record_id), "error": repr(e)},
            )
            return False
        return True

    # Count management

    def count_all(self, record_cls: type[Record]) -> int:
        """Return the number of documents in the record type's default index."""
        index = self.record_indices.resolve(record_cls.type_tag())
        res = self.get_client().count(index=index, query=MATCH_ALL)
        return int(res["count"])


_adapter: ElasticSearchAdapter | None = None
_adapter_lock = threading.Lock()


def get_adapter() -> ElasticSearchAdapter:
    """Return the process-wide adapter, building it from settings on first use."""
    global _adapter

    if _adapter is None:
        with _adapter_lock:
            if _adapter is None:
                _adapter = ElasticSearchAdapter.from_settings()
    return _adapter


def reset_adapter() -> None:
    """Drop the process-wide adapter. Intended for tests."""
    global _adapter

    with _adapter_lock:
        _adapter = None
