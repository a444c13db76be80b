"""
Pod disruption budget metrics.

One sample per status field and object, plus the creation timestamp when
the object has one.
"""

import math
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

from kubernetes import client
from prometheus_client import CollectorRegistry

from kubestate.sharding import Shard, ShardedLister

from .base import MetricDescriptor, ResourceCollector, Sample
from .stats import ScrapeStats

RESOURCE = "poddisruptionbudget"

DEFAULT_LABELS = ("poddisruptionbudget", "namespace")

CREATED = MetricDescriptor(
    "kube_poddisruptionbudget_created",
    "Unix creation timestamp",
    DEFAULT_LABELS,
)
STATUS_CURRENT_HEALTHY = MetricDescriptor(
    "kube_poddisruptionbudget_status_current_healthy",
    "Current number of healthy pods",
    DEFAULT_LABELS,
)
STATUS_DESIRED_HEALTHY = MetricDescriptor(
    "kube_poddisruptionbudget_status_desired_healthy",
    "Minimum desired number of healthy pods",
    DEFAULT_LABELS,
)
STATUS_POD_DISRUPTIONS_ALLOWED = MetricDescriptor(
    "kube_poddisruptionbudget_status_pod_disruptions_allowed",
    "Number of pod disruptions that are currently allowed",
    DEFAULT_LABELS,
)
STATUS_EXPECTED_PODS = MetricDescriptor(
    "kube_poddisruptionbudget_status_expected_pods",
    "Total number of pods counted by this disruption budget",
    DEFAULT_LABELS,
)
STATUS_OBSERVED_GENERATION = MetricDescriptor(
    "kube_poddisruptionbudget_status_observed_generation",
    "Most recent generation observed when updating this PDB status",
    DEFAULT_LABELS,
)

# Status gauges and the V1PodDisruptionBudgetStatus attribute each reads
STATUS_FIELDS: tuple[tuple[MetricDescriptor, str], ...] = (
    (STATUS_CURRENT_HEALTHY, "current_healthy"),
    (STATUS_DESIRED_HEALTHY, "desired_healthy"),
    (STATUS_POD_DISRUPTIONS_ALLOWED, "disruptions_allowed"),
    (STATUS_EXPECTED_PODS, "expected_pods"),
    (STATUS_OBSERVED_GENERATION, "observed_generation"),
)


def unix_seconds(timestamp: datetime) -> float:
    """Whole seconds since the Unix epoch; naive datetimes are taken as UTC."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return float(math.floor(timestamp.timestamp()))


def pod_disruption_budget_labels(pdb: Any) -> tuple[str, str]:
    """Default label values, in DEFAULT_LABELS order."""
    return (pdb.metadata.name, pdb.metadata.namespace)


def pod_disruption_budget_samples(pdb: Any) -> list[Sample]:
    """All samples for one pod disruption budget."""
    labels = pod_disruption_budget_labels(pdb)
    samples: list[Sample] = []

    created = pdb.metadata.creation_timestamp
    if created is not None:
        samples.append((CREATED, unix_seconds(created), labels))

    status = pdb.status
    for descriptor, field_name in STATUS_FIELDS:
        value = getattr(status, field_name, None) if status is not None else None
        samples.append((descriptor, float(value or 0), labels))

    return samples


class PodDisruptionBudgetCollector(ResourceCollector):
    """Collects metrics about all pod disruption budgets in the cluster."""

    resource = RESOURCE
    descriptors = (CREATED,) + tuple(descriptor for descriptor, _ in STATUS_FIELDS)

    def object_samples(self, obj: Any) -> list[Sample]:
        return pod_disruption_budget_samples(obj)


def register_pod_disruption_budget_collector(
    registry: CollectorRegistry,
    shards: Sequence[Shard],
    stats: ScrapeStats,
) -> PodDisruptionBudgetCollector:
    """Register a collector over the merged contents of ``shards``."""
    collector = PodDisruptionBudgetCollector(store=ShardedLister(shards), stats=stats)
    registry.register(collector)
    return collector


def pod_disruption_budget_list_call(
    api_client: client.ApiClient | None,
    namespace: str | None,
) -> tuple[Callable[..., Any], dict[str, Any]]:
    """List call and keyword arguments for one pod disruption budget shard."""
    api = client.PolicyV1Api(api_client)
    if namespace:
        return api.list_namespaced_pod_disruption_budget, {"namespace": namespace}
    return api.list_pod_disruption_budget_for_all_namespaces, {}
