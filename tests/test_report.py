import pytest

from kohakuipam.core.report import PoolUsage, summarize_pool_usage
from kohakuipam.exceptions import IncompatiblePoolError, UnknownDatacenterError
from kohakuipam.models.enums import AllocationType

from tests.utils import (
    make_table,
    prefix_allocation,
    prefix_pool,
    range_allocation,
    range_pool,
    snapshot,
)


def test_range_usage():
    table = make_table(
        {"dc1": [("c1", [range_allocation("pool1", "c1", "dc1", "10.0.0.0-10.0.0.3")]), "c2"]}
    )

    [usage] = summarize_pool_usage(table, range_pool("pool1", dc1=("10.0.0.0/28", 4)))

    assert usage.datacenter == "dc1"
    assert usage.type == AllocationType.RANGE
    assert usage.pool_cidr == "10.0.0.0/28"
    assert usage.allocation_size == 4
    assert usage.total_addresses == 16
    assert usage.used_addresses == 4
    assert usage.free_addresses == 12
    assert usage.allocated_clusters == 1
    assert usage.pending_clusters == 1
    assert usage.remaining_allocations == 3
    assert usage.utilization == pytest.approx(0.25)


def test_prefix_usage_counts_subnet_addresses():
    table = make_table(
        {"dc1": [("c1", [prefix_allocation("pool1", "c1", "dc1", "10.0.0.0/26")]), "c2", "c3"]}
    )

    [usage] = summarize_pool_usage(table, prefix_pool("pool1", dc1=("10.0.0.0/24", 26)))

    assert usage.used_addresses == 64
    assert usage.allocated_clusters == 1
    assert usage.pending_clusters == 2
    assert usage.remaining_allocations == 3


def test_prefix_usage_with_unusable_prefix():
    table = make_table({"dc1": ["c1"]})

    [usage] = summarize_pool_usage(table, prefix_pool("pool1", dc1=("10.0.0.0/28", 27)))

    assert usage.used_addresses == 0
    assert usage.remaining_allocations == 0


def test_usage_ignores_other_pools():
    table = make_table(
        {"dc1": [("c1", [range_allocation("other", "c1", "dc1", "10.0.0.0-10.0.0.7")])]}
    )

    [usage] = summarize_pool_usage(table, range_pool("pool1", dc1=("10.0.0.0/28", 8)))

    assert usage.used_addresses == 0
    assert usage.allocated_clusters == 0
    assert usage.pending_clusters == 1
    assert usage.remaining_allocations == 2


def test_usage_one_entry_per_pool_datacenter():
    table = make_table({"dc1": ["c1"], "dc2": ["c2"], "dc3": ["c3"]})
    pool = range_pool("pool1", dc2=("10.0.0.0/28", 4), dc1=("10.0.0.0/27", 4))

    report = summarize_pool_usage(table, pool)

    assert [u.datacenter for u in report] == ["dc2", "dc1"]


def test_usage_does_not_modify_table():
    table = make_table({"dc1": ["c1", "c2"]})
    before = snapshot(table)
    summarize_pool_usage(table, range_pool("pool1", dc1=("10.0.0.0/28", 4)))
    assert snapshot(table) == before


def test_usage_raises_on_incompatible_allocation():
    table = make_table(
        {"dc1": [("c1", [range_allocation("pool1", "c1", "dc1", "10.0.0.0-10.0.0.3")])]}
    )
    with pytest.raises(IncompatiblePoolError):
        summarize_pool_usage(table, range_pool("pool1", dc1=("10.0.0.0/28", 8)))


def test_usage_raises_on_unknown_datacenter():
    with pytest.raises(UnknownDatacenterError):
        summarize_pool_usage({}, range_pool("pool1", dc1=("10.0.0.0/28", 8)))


def test_pool_usage_to_dict():
    usage = PoolUsage(
        datacenter="dc1",
        pool_name="pool1",
        type=AllocationType.PREFIX,
        pool_cidr="10.0.0.0/24",
        allocation_size=26,
        total_addresses=256,
        used_addresses=64,
        allocated_clusters=1,
        pending_clusters=0,
        remaining_allocations=3,
    )

    data = usage.to_dict()

    assert data["type"] == "prefix"
    assert data["free_addresses"] == 192
    assert data["utilization"] == 0.25


def test_empty_pool_utilization():
    usage = PoolUsage("dc1", "p", AllocationType.RANGE, "", 1, 0, 0, 0, 0, 0)
    assert usage.utilization == 0.0
