"""
Resource Cache

Path-keyed cache that deduplicates texture and material loads within one
scene load. Failed loads are cached too (as None) so a broken path is only
looked up once.
"""

from typing import Any, Dict


class ResourceCache:
    """
    Session-scoped resource cache.

    Two lookups of the same path between clears return the same object.
    There is no expiry or size bound; the owning loader clears the cache
    once per top-level load. Not safe for concurrent writers.
    """

    def __init__(self):
        self._entries: Dict[str, Any] = {}

        # Statistics
        self._stats = {
            'hits': 0,
            'misses': 0,
            'clears': 0,
        }

    def contains(self, path: str) -> bool:
        """Check if a path has an entry (including a cached failure)."""
        found = path in self._entries
        self._stats['hits' if found else 'misses'] += 1
        return found

    def get(self, path: str, default: Any = None) -> Any:
        """
        Retrieve a cached resource.

        Returns:
            Cached object, None for a cached failure, or ``default`` if absent
        """
        return self._entries.get(path, default)

    def put(self, path: str, resource: Any) -> None:
        """Cache a resource (None records a failed load)."""
        self._entries[path] = resource

    def clear(self) -> None:
        self._entries.clear()
        self._stats['clears'] += 1

    def get_stats(self) -> Dict[str, int]:
        """
        Get cache statistics.

        Returns:
            Dictionary with entry count and hit/miss/clear counters
        """
        return {'entries': len(self._entries), **self._stats}

    def __contains__(self, path: str) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)
