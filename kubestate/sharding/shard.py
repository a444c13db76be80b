"""
Shards: independently synchronized, read-only views of one partition of a
resource kind's objects.

A shard is started once with a shared stop event and afterwards serves
snapshots of its current contents. Collectors only ever read from shards.
"""

import threading
from collections.abc import Callable, Iterable, Sequence
from typing import Any, Protocol, runtime_checkable

import structlog
from kubernetes import watch
from kubernetes.client.exceptions import ApiException

from kubestate.utils.logging import get_logger

logger = get_logger(__name__)

ObjectKey = tuple[str, str]

# Kubernetes answers a watch from a compacted resource version with 410 Gone.
HTTP_GONE = 410


@runtime_checkable
class Shard(Protocol):
    """Read and lifecycle interface every shard provides."""

    @property
    def has_synced(self) -> bool: ...

    def list_current_objects(self) -> list[Any]: ...

    def start(self, stop_event: threading.Event) -> None: ...

    def stop(self) -> None: ...

def object_key(obj: Any) -> ObjectKey:
    """Store key of a kubernetes object: (namespace, name)."""
    metadata = obj.metadata
    return (metadata.namespace or "", metadata.name)


class StaticShard:
    """
    Shard over a fixed, in-memory set of objects.

    Used for pre-synchronized caches and in tests. Starting it is a no-op.
    """

    def __init__(self, objects: Iterable[Any] = (), name: str = "static") -> None:
        self.name = name
        self._objects: tuple[Any, ...] = tuple(objects)

    @property
    def has_synced(self) -> bool:
        return True

    def replace(self, objects: Iterable[Any]) -> None:
        """Swap the snapshot for a new one."""
        self._objects = tuple(objects)

    def list_current_objects(self) -> list[Any]:
        return list(self._objects)

    def start(self, stop_event: threading.Event) -> None:
        return None

    def stop(self) -> None:
        return None


class WatchShard:
    """
    List+watch cache of one resource kind, backed by the kubernetes client.

    The sync loop runs in a daemon thread:
    1. list every object and replace the store
    2. watch from the listed resource version, applying events
    3. resume the watch from the last seen version when it times out
    4. relist on 410 Gone, retry after ``retry_delay`` on anything else

    Reads take a snapshot of the store under a lock, so any number of
    scrapes may read while the loop writes.
    """

    def __init__(
        self,
        list_func: Callable[..., Any],
        list_kwargs: dict[str, Any] | None = None,
        name: str | None = None,
        watch_timeout: int = 60,
        retry_delay: float = 5.0,
    ) -> None:
        """
        Initialize the shard.

        Args:
            list_func: Kubernetes list call, e.g.
                ``PolicyV1Api.list_namespaced_pod_disruption_budget``
            list_kwargs: Keyword arguments for every list/watch call
            name: Shard name used in logs
            watch_timeout: Server side timeout for one watch request (seconds)
            retry_delay: Seconds to wait after a failed list or watch
        """
        self.list_func = list_func
        self.list_kwargs = dict(list_kwargs or {})
        self.name = name or getattr(list_func, "__name__", "shard")
        self.watch_timeout = watch_timeout
        self.retry_delay = retry_delay

        self._lock = threading.Lock()
        self._items: dict[ObjectKey, Any] = {}
        self._resource_version: str | None = None
        self._synced = threading.Event()
        self._thread: threading.Thread | None = None
        self._watch: watch.Watch | None = None

    @property
    def has_synced(self) -> bool:
        return self._synced.is_set()

    @property
    def resource_version(self) -> str | None:
        return self._resource_version

    def list_current_objects(self) -> list[Any]:
        with self._lock:
            return list(self._items.values())

    def start(self, stop_event: threading.Event) -> None:
        """Start the background sync loop."""
        if self._thread is not None:
            logger.warning("Shard already started", shard=self.name)
            return

        self._thread = threading.Thread(
            target=self._run,
            args=(stop_event,),
            name=f"shard-{self.name}",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """
        End the in-flight watch request.

        The stream returns after its next event or at the server timeout,
        whichever comes first; the loop then sees the stop event and exits.
        """
        active = self._watch
        if active is not None:
            active.stop()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def _run(self, stop_event: threading.Event) -> None:
        with structlog.contextvars.bound_contextvars(shard=self.name):
            logger.info("Shard sync started")
            needs_list = True

            while not stop_event.is_set():
                try:
                    if needs_list:
                        self.relist()
                        needs_list = False
                    self.watch_once(stop_event)

                except ApiException as e:
                    if e.status == HTTP_GONE:
                        logger.info("Watch expired, relisting", resource_version=self._resource_version)
                        needs_list = True
                        continue
                    logger.error("Shard sync failed", status=e.status, error=str(e))
                    needs_list = True
                    stop_event.wait(self.retry_delay)

                except Exception as e:
                    logger.error("Shard sync failed", error=str(e))
                    needs_list = True
                    stop_event.wait(self.retry_delay)

            logger.info("Shard sync stopped")

    def relist(self) -> None:
        """List every object and replace the store contents."""
        response = self.list_func(**self.list_kwargs)
        items = {object_key(obj): obj for obj in response.items or []}

        with self._lock:
            self._items = items
        self._resource_version = response.metadata.resource_version
        self._synced.set()

        logger.debug(
            "Shard listed",
            count=len(items),
            resource_version=self._resource_version,
        )

    def watch_once(self, stop_event: threading.Event) -> None:
        """Stream one watch request, applying every event to the store."""
        stream = watch.Watch()
        kwargs = dict(self.list_kwargs)
        kwargs["timeout_seconds"] = self.watch_timeout
        if self._resource_version:
            kwargs["resource_version"] = self._resource_version

        self._watch = stream
        try:
            if stop_event.is_set():
                return
            for event in stream.stream(self.list_func, **kwargs):
                self.apply_event(event)
                if stop_event.is_set():
                    break
        finally:
            stream.stop()
            self._watch = None

    def apply_event(self, event: dict[str, Any]) -> None:
        """Apply one watch event to the store."""
        event_type = event["type"]
        obj = event["object"]

        if event_type == "ERROR":
            # The client raises for 410; other error statuses arrive as raw dicts.
            code = obj.get("code") if isinstance(obj, dict) else None
            raise ApiException(status=code, reason=str(obj))

        version = obj.metadata.resource_version
        if event_type == "BOOKMARK":
            self._resource_version = version
            return

        key = object_key(obj)
        with self._lock:
            if event_type == "DELETED":
                self._items.pop(key, None)
            else:
                self._items[key] = obj
        self._resource_version = version


def start_shards(shards: Sequence[Shard], stop_event: threading.Event) -> None:
    """Start every shard with one shared stop event."""
    for shard in shards:
        shard.start(stop_event)
