"""
Shared test fixtures and configuration.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import pytest
from kubernetes.client import (
    V1ObjectMeta,
    V1PodDisruptionBudget,
    V1PodDisruptionBudgetStatus,
)
from prometheus_client import CollectorRegistry

from kubestate.collectors.stats import ScrapeStats

# ============================================================================
# Registry Fixtures
# ============================================================================


@pytest.fixture
def registry() -> CollectorRegistry:
    """Fresh registry for each test."""
    return CollectorRegistry()


@pytest.fixture
def stats_registry() -> CollectorRegistry:
    """Separate registry for scrape stats, keeping collector output isolated."""
    return CollectorRegistry()


@pytest.fixture
def stats(stats_registry: CollectorRegistry) -> ScrapeStats:
    """Scrape stats on their own registry."""
    return ScrapeStats(registry=stats_registry)


# ============================================================================
# Pod Disruption Budget Fixtures
# ============================================================================


@pytest.fixture
def make_pdb() -> Callable[..., V1PodDisruptionBudget]:
    """Factory for pod disruption budget objects."""

    def _make(
        name: str,
        namespace: str,
        created: datetime | None = None,
        generation: int = 1,
        current_healthy: int = 0,
        desired_healthy: int = 0,
        disruptions_allowed: int = 0,
        expected_pods: int = 0,
        observed_generation: int | None = None,
        resource_version: str = "1",
    ) -> V1PodDisruptionBudget:
        return V1PodDisruptionBudget(
            metadata=V1ObjectMeta(
                name=name,
                namespace=namespace,
                creation_timestamp=created,
                generation=generation,
                resource_version=resource_version,
            ),
            status=V1PodDisruptionBudgetStatus(
                current_healthy=current_healthy,
                desired_healthy=desired_healthy,
                disruptions_allowed=disruptions_allowed,
                expected_pods=expected_pods,
                observed_generation=observed_generation,
            ),
        )

    return _make


@pytest.fixture
def pdb1(make_pdb: Callable[..., V1PodDisruptionBudget]) -> V1PodDisruptionBudget:
    """Budget with a creation timestamp."""
    return make_pdb(
        "pdb1",
        "ns1",
        created=datetime.fromtimestamp(1_500_000_000, tz=UTC),
        generation=21,
        current_healthy=12,
        desired_healthy=10,
        disruptions_allowed=2,
        expected_pods=15,
        observed_generation=111,
    )


@pytest.fixture
def pdb2(make_pdb: Callable[..., V1PodDisruptionBudget]) -> V1PodDisruptionBudget:
    """Budget without a creation timestamp."""
    return make_pdb(
        "pdb2",
        "ns2",
        generation=14,
        current_healthy=8,
        desired_healthy=9,
        disruptions_allowed=0,
        expected_pods=10,
        observed_generation=1111,
    )


class ListStore:
    """In-memory resource store returning a fixed list or raising."""

    def __init__(self, items: list[Any] | None = None, error: Exception | None = None) -> None:
        self.items = items or []
        self.error = error
        self.calls = 0

    def list(self) -> list[Any]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.items)


@pytest.fixture
def list_store() -> type[ListStore]:
    """In-memory store class."""
    return ListStore
