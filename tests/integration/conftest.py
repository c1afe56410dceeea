"""Module for test configurations for the integration test directory."""

import logging
import uuid
from typing import Iterator

import pytest
from elasticsearch import Elasticsearch
from testcontainers.elasticsearch import ElasticSearchContainer

from elasticwrap.search.elastic import ElasticSearchAdapter

logger = logging.getLogger(__name__)

ES_IMAGE = "docker.elastic.co/elasticsearch/elasticsearch:8.13.4"


@pytest.fixture(scope="session")
def es_url() -> Iterator[str]:
    """ElasticSearch URL fixture."""
    with ElasticSearchContainer(ES_IMAGE) as es:
        url = es.get_url()
        logger.info("Started Elasticsearch container", extra={"url": url})
        yield url


@pytest.fixture
def es_client(es_url: str) -> Iterator[Elasticsearch]:
    """Plain Elasticsearch client for setting up and inspecting the cluster."""
    client = Elasticsearch(es_url)
    try:
        client.cluster.health(wait_for_status="yellow", timeout="10s")
        yield client
    finally:
        client.close()


@pytest.fixture
def promotions_index(es_client: Elasticsearch) -> Iterator[str]:
    """Create a single-shard index for Promotion records and delete it afterwards."""
    index = f"promotions_{uuid.uuid4().hex}"
    es_client.indices.create(index=index, settings={"number_of_shards": 1})
    yield index
    es_client.indices.delete(index=index, ignore_unavailable=True)


@pytest.fixture
def adapter(es_url: str, promotions_index: str) -> ElasticSearchAdapter:
    """Return an adapter pointed at the container, paging two hits at a time."""
    return ElasticSearchAdapter(
        url=es_url,
        max_retries=3,
        scroll_ttl="1m",
        page_size_per_shard=2,
        record_indices={"Promotion": promotions_index},
    )
