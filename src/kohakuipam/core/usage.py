"""
Per-(datacenter, pool) usage tracking for one reconciliation pass.

Keys are opaque strings: a single address for range pools, a canonical
subnet CIDR for prefix pools. A subnet is tracked as one unit and is never
expanded into its member addresses, since prefix candidates are only ever
compared against same-length subnets.
"""

from __future__ import annotations


class UsageTracker:
    """
    Set of consumed keys per (datacenter, pool name).

    Built fresh for every reconciliation call and discarded afterwards.
    Keys are only ever added.
    """

    def __init__(self):
        # (datacenter, pool_name) -> used keys
        self._used: dict[tuple[str, str], set[str]] = {}

    def mark_used(self, datacenter: str, pool_name: str, key: str) -> None:
        """Record key as consumed in the (datacenter, pool_name) space."""
        self._used.setdefault((datacenter, pool_name), set()).add(key)

    def is_used(self, datacenter: str, pool_name: str, key: str) -> bool:
        """Whether key is consumed in the (datacenter, pool_name) space."""
        return key in self._used.get((datacenter, pool_name), ())

    def used_keys(self, datacenter: str, pool_name: str) -> frozenset[str]:
        """Snapshot of the consumed keys of one space."""
        return frozenset(self._used.get((datacenter, pool_name), ()))

    def __len__(self) -> int:
        return sum(len(keys) for keys in self._used.values())

    def __repr__(self) -> str:
        return f"UsageTracker(spaces={len(self._used)}, keys={len(self)})"
