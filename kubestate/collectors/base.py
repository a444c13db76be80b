"""
Base resource collector.

A resource collector turns the objects of one resource kind into gauge
samples on every scrape. Subclasses declare a fixed descriptor table and a
pure mapping from object to samples; the base class implements the
prometheus_client describe/collect protocol, scrape health bookkeeping and
failure isolation.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from kubestate.sharding.lister import ListingError, ResourceStore
from kubestate.utils.logging import get_logger

from .stats import ScrapeStats

logger = get_logger(__name__)


@dataclass(frozen=True)
class MetricDescriptor:
    """Identity of one gauge series: name, help text and ordered label names."""

    name: str
    help: str
    labels: tuple[str, ...]

    def family(self) -> GaugeMetricFamily:
        """Build an empty gauge family with this identity."""
        return GaugeMetricFamily(self.name, self.help, labels=list(self.labels))


# (descriptor, value, label values in descriptor label order)
Sample = tuple[MetricDescriptor, float, tuple[str, ...]]


class ResourceCollector(Collector, ABC):
    """
    Abstract base class for per-resource-kind collectors.

    Subclasses must define:
    - resource: label value used for scrape health metrics
    - descriptors: every metric the collector can ever emit
    - object_samples(obj): samples for one object
    """

    resource: ClassVar[str]
    descriptors: ClassVar[tuple[MetricDescriptor, ...]]

    def __init__(self, store: ResourceStore, stats: ScrapeStats) -> None:
        """
        Initialize the collector.

        Args:
            store: Source of the objects to convert, read once per scrape
            stats: Shared scrape health metrics
        """
        self.store = store
        self.stats = stats

    @abstractmethod
    def object_samples(self, obj: Any) -> Iterable[Sample]:
        """
        Samples for one object.

        Must be a pure function of the object. Every sample must reference
        a descriptor from ``descriptors``.
        """

    def describe(self) -> list[GaugeMetricFamily]:
        """Every declared metric, without samples."""
        return [descriptor.family() for descriptor in self.descriptors]

    def collect(self) -> list[GaugeMetricFamily]:
        """Run one scrape of this resource kind."""
        try:
            items = self.store.list()
        except ListingError as e:
            self.stats.record_error(self.resource)
            logger.error("Listing resources failed", resource=self.resource, error=str(e))
            return []

        self.stats.record_success(self.resource, len(items))

        families = self._build_families(items)

        logger.debug("Collected resources", resource=self.resource, count=len(items))
        return families

    def _build_families(self, items: Sequence[Any]) -> list[GaugeMetricFamily]:
        families = {descriptor.name: descriptor.family() for descriptor in self.descriptors}

        for obj in items:
            for descriptor, value, label_values in self.object_samples(obj):
                families[descriptor.name].add_metric(list(label_values), value)

        return list(families.values())
