"""Rich renderables for allocation tables, results and usage reports."""

from rich.table import Table

from kohakuipam.core.report import PoolUsage
from kohakuipam.models.enums import AllocationType
from kohakuipam.models.pool import DatacenterAllocations, IPAMAllocation


def _allocation_value(allocation: IPAMAllocation) -> str:
    if allocation.cidr:
        return allocation.cidr
    return "\n".join(allocation.addresses or [])


def format_allocation_table(
    datacenter_allocations: DatacenterAllocations,
    datacenter: str | None = None,
    pool_name: str | None = None,
) -> Table:
    """Table of every allocation, one row per (cluster, pool)."""
    table = Table(title="IPAM Allocations", show_header=True)
    table.add_column("Datacenter", style="cyan")
    table.add_column("Cluster", style="bold")
    table.add_column("Pool", style="magenta")
    table.add_column("Type")
    table.add_column("Addresses", style="green", overflow="fold")

    for dc, clusters in datacenter_allocations.items():
        if datacenter and dc != datacenter:
            continue
        for cluster in clusters:
            allocations = [
                a
                for a in cluster.allocations
                if not pool_name or a.pool_name == pool_name
            ]
            if not allocations and not pool_name:
                table.add_row(dc, cluster.name, "[dim]-[/dim]", "", "")
            for allocation in allocations:
                table.add_row(
                    dc,
                    cluster.name,
                    allocation.pool_name,
                    allocation.type.value,
                    _allocation_value(allocation),
                )

    return table


def format_new_allocations(
    allocations: list[IPAMAllocation], title: str = "New Allocations"
) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("Datacenter", style="cyan")
    table.add_column("Cluster", style="bold")
    table.add_column("Addresses", style="green", overflow="fold")

    for allocation in allocations:
        table.add_row(
            allocation.datacenter,
            allocation.cluster,
            _allocation_value(allocation),
        )

    return table


def format_usage_table(usages: list[PoolUsage]) -> Table:
    """Per-datacenter usage of one pool."""
    table = Table(title="Pool Usage", show_header=True)
    table.add_column("Datacenter", style="cyan")
    table.add_column("Pool CIDR")
    table.add_column("Type")
    table.add_column("Per Cluster", justify="right")
    table.add_column("Used", justify="right")
    table.add_column("Free", justify="right")
    table.add_column("Util.", justify="right")
    table.add_column("Clusters", justify="right")
    table.add_column("Room For", justify="right")

    for usage in usages:
        per_cluster = (
            f"/{usage.allocation_size}"
            if usage.type == AllocationType.PREFIX
            else str(usage.allocation_size)
        )
        util = usage.utilization * 100
        util_style = "red" if util >= 90 else "yellow" if util >= 70 else "green"
        clusters = f"{usage.allocated_clusters}"
        if usage.pending_clusters:
            clusters += f" [yellow](+{usage.pending_clusters} pending)[/yellow]"
        table.add_row(
            usage.datacenter,
            usage.pool_cidr,
            usage.type.value,
            per_cluster,
            str(usage.used_addresses),
            str(usage.free_addresses),
            f"[{util_style}]{util:.1f}%[/{util_style}]",
            clusters,
            str(usage.remaining_allocations),
        )

    return table
