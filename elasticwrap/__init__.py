"""A thin facade over the Elasticsearch client."""

from elasticwrap.records import Record, RecordIndexMap, ScrollPage
from elasticwrap.search.elastic import ElasticSearchAdapter, get_adapter

__all__ = [
    "ElasticSearchAdapter",
    "Record",
    "RecordIndexMap",
    "ScrollPage",
    "get_adapter",
]
