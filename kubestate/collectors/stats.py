"""
Scrape health metrics shared by every resource collector.
"""

from prometheus_client import CollectorRegistry, Counter, Summary


class ScrapeStats:
    """
    Per-resource-kind scrape health.

    Exposes:
    - <prefix>_scrape_error_total: listing failures, labeled by resource
    - <prefix>_resources_per_scrape: objects returned per successful scrape
    """

    def __init__(
        self,
        registry: CollectorRegistry | None = None,
        prefix: str = "ksm",
    ) -> None:
        """
        Initialize scrape stats.

        Args:
            registry: Prometheus registry to register on (fresh one if None)
            prefix: Prefix for both metric names
        """
        registry = registry or CollectorRegistry()

        self.scrape_errors = Counter(
            f"{prefix}_scrape_error_total",
            "Total scrape errors encountered when scraping a resource",
            ["resource"],
            registry=registry,
        )

        self.resources_per_scrape = Summary(
            f"{prefix}_resources_per_scrape",
            "Number of resources returned per scrape",
            ["resource"],
            registry=registry,
        )

    def record_error(self, resource: str) -> None:
        """Count one failed scrape."""
        self.scrape_errors.labels(resource=resource).inc()

    def record_success(self, resource: str, count: int) -> None:
        """Record a successful scrape of ``count`` objects."""
        # Zero increment so the error series exists before the first failure
        self.scrape_errors.labels(resource=resource).inc(0)
        self.resources_per_scrape.labels(resource=resource).observe(float(count))
