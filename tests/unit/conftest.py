# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Module for test configurations for the unit test directory."""

from typing import Any
from unittest.mock import MagicMock

import pytest
from elastic_transport import ApiResponseMeta, HttpHeaders, NodeConfig

from elasticwrap.search.elastic import ElasticSearchAdapter


@pytest.fixture(name="adapter")
def fixture_adapter() -> ElasticSearchAdapter:
    """Return an ElasticSearchAdapter configured with dummy connection settings."""
    return ElasticSearchAdapter(
        url="https://example:9200",
        api_key="abc123",
        scroll_ttl="3m",
        page_size_per_shard=500,
        record_indices={"Promotion": "promotions", "Article": "articles"},
    )


@pytest.fixture(name="es_client")
def fixture_es_client() -> MagicMock:
    """Return a mocked Elasticsearch client"""
    client = MagicMock(name="ElasticsearchClient")
    client.indices = MagicMock(name="IndicesClient")
    client.cluster.health.return_value = {"cluster_name": "test-cluster", "status": "green"}
    return client


@pytest.fixture(name="api_response_meta")
def fixture_api_response_meta() -> Any:
    """Return a factory of response metadata for building `ApiError` instances."""

    def api_response_meta(status: int) -> ApiResponseMeta:
        return ApiResponseMeta(
            status=status,
            http_version="1.1",
            headers=HttpHeaders(),
            duration=0.0,
            node=NodeConfig(scheme="http", host="localhost", port=9200),
        )

    return api_response_meta
