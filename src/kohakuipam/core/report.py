"""
Pool usage reporting.

Summarizes how much of each datacenter's pool CIDR a pool has handed out,
using the same replay (and the same compatibility checks) as a
reconciliation pass.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

from kohakuipam.core.reconciler import IPAMReconciler
from kohakuipam.models.address import parse_network, subnet_size
from kohakuipam.models.enums import AllocationType
from kohakuipam.models.pool import DatacenterAllocations, IPAMPool


@dataclass
class PoolUsage:
    """Usage of one pool in one datacenter."""

    datacenter: str
    pool_name: str
    type: AllocationType
    pool_cidr: str
    allocation_size: int  # addresses per cluster (range) or prefix length
    total_addresses: int
    used_addresses: int
    allocated_clusters: int
    pending_clusters: int
    remaining_allocations: int  # further clusters the pool can still serve

    @property
    def free_addresses(self) -> int:
        return self.total_addresses - self.used_addresses

    @property
    def utilization(self) -> float:
        """Used share of the pool, 0.0-1.0."""
        if not self.total_addresses:
            return 0.0
        return self.used_addresses / self.total_addresses

    def to_dict(self) -> dict:
        data = asdict(self)
        data["type"] = self.type.value
        data["free_addresses"] = self.free_addresses
        data["utilization"] = round(self.utilization, 4)
        return data


def summarize_pool_usage(
    datacenter_allocations: DatacenterAllocations, pool: IPAMPool
) -> list[PoolUsage]:
    """
    Report usage of pool for every datacenter it configures.

    Raises:
        UnknownDatacenterError: If the pool names a datacenter not in the table.
        IncompatiblePoolError: If an existing allocation does not fit the pool.
        ParseError: If a CIDR or range is malformed.
    """
    reconciler = IPAMReconciler(datacenter_allocations)
    reconciler.check_datacenters(pool)
    networks = reconciler.pool_networks(pool)
    tracker = reconciler.replay(pool, networks)

    report = []
    for dc, settings in pool.datacenters.items():
        network = networks[dc]
        clusters = datacenter_allocations[dc]
        allocated = sum(1 for c in clusters if c.get_allocation(pool.name))
        keys = tracker.used_keys(dc, pool.name)

        if settings.type == AllocationType.RANGE:
            allocation_size = settings.allocation_range
            used = len(keys)
            remaining = (network.num_addresses - used) // allocation_size
        else:
            allocation_size = settings.allocation_prefix
            used = sum(parse_network(key).num_addresses for key in keys)
            if network.prefixlen <= allocation_size <= network.max_prefixlen:
                candidates = network.num_addresses // subnet_size(
                    allocation_size, network.max_prefixlen
                )
                remaining = candidates - len(keys)
            else:
                remaining = 0

        report.append(
            PoolUsage(
                datacenter=dc,
                pool_name=pool.name,
                type=settings.type,
                pool_cidr=str(network),
                allocation_size=allocation_size,
                total_addresses=network.num_addresses,
                used_addresses=used,
                allocated_clusters=allocated,
                pending_clusters=len(clusters) - allocated,
                remaining_allocations=remaining,
            )
        )

    return report
