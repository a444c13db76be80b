"""
Resource collectors for the exporter.

Each collector converts the objects of one resource kind into gauges:
- Base: describe/collect protocol, scrape health, failure isolation
- PodDisruptionBudget: creation time and disruption budget status
"""

from .base import MetricDescriptor, ResourceCollector, Sample
from .poddisruptionbudget import (
    PodDisruptionBudgetCollector,
    pod_disruption_budget_labels,
    pod_disruption_budget_samples,
    register_pod_disruption_budget_collector,
)
from .stats import ScrapeStats

__all__ = [
    "MetricDescriptor",
    "ResourceCollector",
    "Sample",
    "ScrapeStats",
    "PodDisruptionBudgetCollector",
    "pod_disruption_budget_labels",
    "pod_disruption_budget_samples",
    "register_pod_disruption_budget_collector",
]
