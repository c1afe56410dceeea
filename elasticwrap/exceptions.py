"""elasticwrap specific exceptions.

Errors raised by the cluster are not wrapped here: `elasticsearch.ApiError`
subclasses (`ConflictError`, `NotFoundError`, ...) and `TransportError`
reach callers untouched.
"""


class ElasticWrapError(Exception):
    """Base class for errors raised by elasticwrap itself."""


class UnmappedRecordTypeError(ElasticWrapError, LookupError):
    """Raised when a record type has no default index and none was given."""

    def __init__(self, record_type: str) -> None:
        super().__init__(
            f"No default index is configured for record type '{record_type}'."
            " Pass an index name or add it to `record_indices`."
        )
        self.record_type = record_type
