"""
Merged listing across the shards of one resource kind.
"""

from collections.abc import Sequence
from typing import Any, Protocol

from .shard import Shard


class ListingError(Exception):
    """Building the merged view of a resource kind failed."""


class ResourceStore(Protocol):
    """Capability collectors list their objects through."""

    def list(self) -> Sequence[Any]:
        """Return the current objects; raise ListingError on failure."""
        ...


class ShardedLister:
    """
    Concatenates the current contents of every shard.

    Shards are read in registration order, each in its own native order.
    No sorting, filtering or deduplication happens here; shards are expected
    to partition the resource space between them.
    """

    def __init__(self, shards: Sequence[Shard]) -> None:
        self.shards = list(shards)

    def list(self) -> list[Any]:
        items: list[Any] = []
        for index, shard in enumerate(self.shards):
            try:
                items.extend(shard.list_current_objects())
            except Exception as e:
                name = getattr(shard, "name", index)
                raise ListingError(f"listing shard {name} failed: {e}") from e
        return items
