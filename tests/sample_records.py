"""Record types shared by the unit and integration tests."""

from elasticwrap.records import Record


class Promotion(Record):
    """A record mapped to the `promotions` index in the testing settings."""

    title: str
    discount: float = 0.0


class Article(Record):
    """A record whose tag differs from its class name."""

    record_type = "Article"

    headline: str


class Unmapped(Record):
    """A record type without a default index."""

    name: str
