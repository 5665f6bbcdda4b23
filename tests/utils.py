"""Builders for allocation tables and pool specs used across tests."""

from kohakuipam.models.pool import Cluster, IPAMAllocation, IPAMPool


def range_allocation(pool, cluster, dc, *addresses):
    return IPAMAllocation(
        pool_name=pool,
        cluster=cluster,
        datacenter=dc,
        type="range",
        addresses=list(addresses),
    )


def prefix_allocation(pool, cluster, dc, cidr):
    return IPAMAllocation(
        pool_name=pool, cluster=cluster, datacenter=dc, type="prefix", cidr=cidr
    )


def make_table(layout: dict) -> dict:
    """Build a table from {dc: [cluster name | (name, [allocations])]}."""
    table = {}
    for dc, clusters in layout.items():
        table[dc] = []
        for cluster in clusters:
            if isinstance(cluster, str):
                table[dc].append(Cluster(name=cluster))
            else:
                name, allocations = cluster
                table[dc].append(Cluster(name=name, allocations=list(allocations)))
    return table


def range_pool(name, **datacenters):
    """range_pool("p", dc=("10.0.0.0/28", 8))"""
    return IPAMPool(
        name=name,
        datacenters={
            dc: {"type": "range", "poolCidr": cidr, "allocationRange": count}
            for dc, (cidr, count) in datacenters.items()
        },
    )


def prefix_pool(name, **datacenters):
    """prefix_pool("p", dc=("10.0.0.0/16", 24))"""
    return IPAMPool(
        name=name,
        datacenters={
            dc: {"type": "prefix", "poolCidr": cidr, "allocationPrefix": prefix}
            for dc, (cidr, prefix) in datacenters.items()
        },
    )


def snapshot(table: dict) -> dict:
    return {
        dc: [cluster.model_dump() for cluster in clusters]
        for dc, clusters in table.items()
    }
