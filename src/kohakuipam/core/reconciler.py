"""
IPAM pool reconciliation engine.

One reconciliation pass brings a datacenter allocation table up to date with
a pool spec. Clusters already holding an allocation from the pool keep it;
every other cluster of a configured datacenter gets new address space.

Pass Stages:
============

1. Replay:
   - Every existing allocation from the pool (same name) in a configured
     datacenter is checked against that datacenter's settings
   - Compatible allocations are marked used in a fresh UsageTracker
   - Any incompatible allocation aborts the pass

2. Generate:
   - For each configured datacenter, clusters are visited in list order
   - Clusters without an allocation from the pool get a range or a subnet,
     threading the same tracker so allocations never overlap
   - Results are collected as pending records; any error aborts the pass

3. Commit:
   - Only after every cluster succeeded, pending records are appended to
     their clusters' allocation lists

The table is never touched before Commit, so it is unchanged on every error
path. Reapplying an identical pool is a no-op. The engine does not log;
callers report outcomes.

Usage:
    from kohakuipam.core.reconciler import apply

    new_allocations = apply(datacenter_allocations, pool)
"""

from __future__ import annotations

from dataclasses import dataclass

from kohakuipam.core.prefix_allocation import (
    check_prefix_allocation,
    find_free_subnet,
)
from kohakuipam.core.range_allocation import (
    check_range_allocation,
    find_free_ranges,
    parse_address_ranges,
)
from kohakuipam.core.usage import UsageTracker
from kohakuipam.exceptions import IncompatiblePoolError, UnknownDatacenterError
from kohakuipam.models.address import IPNetwork, iter_range, parse_network
from kohakuipam.models.enums import AllocationType
from kohakuipam.models.pool import (
    Cluster,
    DatacenterAllocations,
    IPAMAllocation,
    IPAMPool,
    PoolDatacenterSettings,
)


@dataclass
class PendingAllocation:
    """An allocation generated for a cluster but not yet committed."""

    cluster: Cluster
    allocation: IPAMAllocation


class IPAMReconciler:
    """
    Reconciles pool specs against a caller-owned allocation table.

    The table is mutated in place by apply(), and only on success. The
    reconciler keeps no state between calls; each call builds its own
    UsageTracker. Calls against the same table must be serialized by the
    caller.
    """

    def __init__(self, datacenter_allocations: DatacenterAllocations):
        self.datacenter_allocations = datacenter_allocations

    # =========================================================================
    # Public API
    # =========================================================================

    def apply(self, pool: IPAMPool) -> list[IPAMAllocation]:
        """
        Allocate address space from pool to every cluster still lacking it.

        Returns:
            The newly committed allocation records (empty on a no-op).

        Raises:
            IPAMError: Any engine error; the table is left unchanged.
        """
        pending = self.plan(pool)

        for item in pending:
            item.cluster.allocations.append(item.allocation)

        return [item.allocation for item in pending]

    def plan(self, pool: IPAMPool) -> list[PendingAllocation]:
        """Run Replay and Generate without committing anything."""
        self.check_datacenters(pool)
        networks = self.pool_networks(pool)
        tracker = self.replay(pool, networks)
        return self._generate(pool, networks, tracker)

    def pool_networks(self, pool: IPAMPool) -> dict[str, IPNetwork]:
        """
        Parse the pool CIDR of every configured datacenter.

        Raises:
            ParseError: If a pool CIDR is malformed.
        """
        return {
            dc: parse_network(settings.pool_cidr)
            for dc, settings in pool.datacenters.items()
        }

    def replay(
        self, pool: IPAMPool, networks: dict[str, IPNetwork]
    ) -> UsageTracker:
        """
        Build the usage of pool from the allocations it already made.

        Allocations from other pools, or in datacenters the pool does not
        configure, are ignored.

        Raises:
            IncompatiblePoolError: If an existing allocation does not fit.
            ParseError: If an existing allocation is malformed.
        """
        tracker = UsageTracker()

        for dc, clusters in self.datacenter_allocations.items():
            settings = pool.datacenters.get(dc)
            if settings is None:
                continue
            for cluster in clusters:
                for allocation in cluster.allocations:
                    if allocation.pool_name != pool.name:
                        continue
                    self._replay_allocation(
                        dc, cluster, allocation, settings, networks[dc], tracker
                    )

        return tracker

    def check_datacenters(self, pool: IPAMPool) -> None:
        """Raise UnknownDatacenterError for pool datacenters missing from the table."""
        for dc in pool.datacenters:
            if dc not in self.datacenter_allocations:
                raise UnknownDatacenterError(dc, pool.name)

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _replay_allocation(
        self,
        dc: str,
        cluster: Cluster,
        allocation: IPAMAllocation,
        settings: PoolDatacenterSettings,
        network: IPNetwork,
        tracker: UsageTracker,
    ) -> None:
        """Check one existing allocation and mark its space used."""
        if allocation.type != settings.type:
            raise IncompatiblePoolError(
                pool_name=allocation.pool_name,
                datacenter=dc,
                cluster=cluster.name,
                reason=(
                    f"allocation type '{allocation.type.value}' differs from "
                    f"pool type '{settings.type.value}'"
                ),
            )

        if allocation.type == AllocationType.RANGE:
            ranges = parse_address_ranges(allocation.addresses or [])
            reason = check_range_allocation(
                ranges, network, settings.allocation_range
            )
        else:
            subnet = parse_network(allocation.cidr)
            reason = check_prefix_allocation(
                subnet, network, settings.allocation_prefix
            )

        if reason:
            raise IncompatiblePoolError(
                pool_name=allocation.pool_name,
                datacenter=dc,
                cluster=cluster.name,
                reason=reason,
            )

        # Expand only once the record is known to fit inside the pool
        if allocation.type == AllocationType.RANGE:
            keys = [
                str(address)
                for first, last in ranges
                for address in iter_range(first, last)
            ]
        else:
            keys = [str(subnet)]

        for key in keys:
            tracker.mark_used(dc, allocation.pool_name, key)

    def _generate(
        self,
        pool: IPAMPool,
        networks: dict[str, IPNetwork],
        tracker: UsageTracker,
    ) -> list[PendingAllocation]:
        pending: list[PendingAllocation] = []

        for dc, settings in pool.datacenters.items():
            # List order decides who gets the lower addresses
            for cluster in self.datacenter_allocations[dc]:
                if cluster.get_allocation(pool.name) is not None:
                    continue
                allocation = self._allocate(
                    dc, cluster, pool.name, settings, networks[dc], tracker
                )
                pending.append(PendingAllocation(cluster, allocation))

        return pending

    def _allocate(
        self,
        dc: str,
        cluster: Cluster,
        pool_name: str,
        settings: PoolDatacenterSettings,
        network: IPNetwork,
        tracker: UsageTracker,
    ) -> IPAMAllocation:
        if settings.type == AllocationType.RANGE:
            addresses = find_free_ranges(
                dc, pool_name, network, settings.allocation_range, tracker
            )
            return IPAMAllocation(
                pool_name=pool_name,
                cluster=cluster.name,
                datacenter=dc,
                type=AllocationType.RANGE,
                addresses=addresses,
            )

        cidr = find_free_subnet(
            dc, pool_name, network, settings.allocation_prefix, tracker
        )
        tracker.mark_used(dc, pool_name, cidr)
        return IPAMAllocation(
            pool_name=pool_name,
            cluster=cluster.name,
            datacenter=dc,
            type=AllocationType.PREFIX,
            cidr=cidr,
        )


# =============================================================================
# Module-level Entry Points
# =============================================================================


def apply(
    datacenter_allocations: DatacenterAllocations, pool: IPAMPool
) -> list[IPAMAllocation]:
    """Apply pool to datacenter_allocations in place. See IPAMReconciler.apply."""
    return IPAMReconciler(datacenter_allocations).apply(pool)


def plan(
    datacenter_allocations: DatacenterAllocations, pool: IPAMPool
) -> list[IPAMAllocation]:
    """Return the records apply() would commit, without committing them."""
    pending = IPAMReconciler(datacenter_allocations).plan(pool)
    return [item.allocation for item in pending]
