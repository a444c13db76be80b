"""
Sharded object caches for the exporter.

Each resource kind is backed by one or more shards (typically one per
namespace). The ShardedLister merges them into a single listing per scrape.
"""

from .lister import ListingError, ResourceStore, ShardedLister
from .shard import Shard, StaticShard, WatchShard, object_key, start_shards

__all__ = [
    "ListingError",
    "ResourceStore",
    "ShardedLister",
    "Shard",
    "StaticShard",
    "WatchShard",
    "object_key",
    "start_shards",
]
