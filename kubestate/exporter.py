"""
Exporter assembly.

Wires the enabled resource kinds to their shards and collectors on one
explicit Prometheus registry, and owns the stop event shared by every shard.
"""

import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from kubernetes import client, config
from prometheus_client import CollectorRegistry, generate_latest

from config.settings import AppSettings
from kubestate.collectors.base import ResourceCollector
from kubestate.collectors.poddisruptionbudget import (
    RESOURCE as POD_DISRUPTION_BUDGET,
    pod_disruption_budget_list_call,
    register_pod_disruption_budget_collector,
)
from kubestate.collectors.stats import ScrapeStats
from kubestate.sharding import Shard, WatchShard, start_shards
from kubestate.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ResourceKind:
    """How to register and source one resource kind."""

    name: str
    register: Callable[[CollectorRegistry, Sequence[Shard], ScrapeStats], ResourceCollector]
    list_call: Callable[[client.ApiClient | None, str | None], tuple[Callable[..., Any], dict[str, Any]]]


RESOURCE_KINDS: dict[str, ResourceKind] = {
    POD_DISRUPTION_BUDGET: ResourceKind(
        name=POD_DISRUPTION_BUDGET,
        register=register_pod_disruption_budget_collector,
        list_call=pod_disruption_budget_list_call,
    ),
}


def get_resource_kind(name: str) -> ResourceKind:
    try:
        return RESOURCE_KINDS[name]
    except KeyError:
        available = ", ".join(sorted(RESOURCE_KINDS))
        raise ValueError(f"Unknown resource kind {name!r} (available: {available})") from None


class Exporter:
    """
    Registry, scrape stats, shards and collectors of one exporter process.
    """

    def __init__(
        self,
        registry: CollectorRegistry | None = None,
        prefix: str = "ksm",
    ) -> None:
        self.registry = registry or CollectorRegistry()
        self.stats = ScrapeStats(registry=self.registry, prefix=prefix)
        self.shards: list[Shard] = []
        self.collectors: dict[str, ResourceCollector] = {}
        self._stop_event = threading.Event()

    def register(self, kind: str, shards: Sequence[Shard]) -> ResourceCollector:
        """Register the collector of ``kind`` over ``shards``."""
        resource_kind = get_resource_kind(kind)
        if kind in self.collectors:
            raise ValueError(f"Resource kind {kind!r} already registered")

        collector = resource_kind.register(self.registry, shards, self.stats)
        self.collectors[kind] = collector
        self.shards.extend(shards)

        logger.info("Collector registered", resource=kind, shards=len(shards))
        return collector

    def start(self) -> None:
        """Start every shard's background sync."""
        start_shards(self.shards, self._stop_event)
        logger.info("Exporter started", shards=len(self.shards))

    def stop(self) -> None:
        """Signal every shard to stop syncing and end in-flight watches."""
        self._stop_event.set()
        for shard in self.shards:
            shard.stop()
        logger.info("Exporter stopped")

    @property
    def synced(self) -> bool:
        return all(shard.has_synced for shard in self.shards)

    def generate_latest(self) -> bytes:
        """Text exposition of every registered metric."""
        return generate_latest(self.registry)


def load_kube_config(settings: AppSettings) -> None:
    """Load in-cluster config or a kubeconfig file."""
    kube = settings.kubernetes
    try:
        if kube.in_cluster:
            config.load_incluster_config()
            logger.info("Loaded in-cluster Kubernetes config")
        else:
            config.load_kube_config(config_file=kube.config_path)
            logger.info("Loaded kubeconfig", path=kube.config_path or "~/.kube/config")
    except Exception as e:
        logger.error("Failed to load Kubernetes config", error=str(e))
        raise


def build_watch_shards(
    kind: ResourceKind,
    settings: AppSettings,
    api_client: client.ApiClient | None = None,
) -> list[WatchShard]:
    """One shard per configured namespace, or one for all namespaces."""
    kube = settings.kubernetes
    namespaces: list[str | None] = list(kube.namespace_list) or [None]

    shards = []
    for namespace in namespaces:
        list_func, list_kwargs = kind.list_call(api_client, namespace)
        shards.append(
            WatchShard(
                list_func,
                list_kwargs,
                name=f"{kind.name}/{namespace or '*'}",
                watch_timeout=kube.watch_timeout_seconds,
                retry_delay=kube.retry_delay_seconds,
            )
        )
    return shards


def build_exporter(
    settings: AppSettings,
    api_client: client.ApiClient | None = None,
) -> Exporter:
    """
    Build an exporter for the configured resource kinds.

    Args:
        settings: Application settings
        api_client: Kubernetes API client; the kube config is loaded and a
            default client used when None
    """
    kinds = [get_resource_kind(name) for name in settings.collector_list]

    if api_client is None:
        load_kube_config(settings)

    exporter = Exporter(prefix=settings.metrics_prefix)
    for kind in kinds:
        exporter.register(kind.name, build_watch_shards(kind, settings, api_client))

    return exporter
