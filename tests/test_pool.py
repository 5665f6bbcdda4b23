import pytest
from pydantic import ValidationError

from kohakuipam.models.enums import AllocationType
from kohakuipam.models.pool import Cluster, IPAMAllocation, PoolDatacenterSettings


@pytest.mark.parametrize(
    "field, value",
    [("allocationRange", 0), ("allocationRange", -1), ("allocationPrefix", -1)],
)
def test_allocation_sizes_have_lower_bounds(field, value):
    allocation_type = "range" if field == "allocationRange" else "prefix"
    with pytest.raises(ValidationError) as exc:
        PoolDatacenterSettings(
            type=allocation_type, poolCidr="10.0.0.0/24", **{field: value}
        )
    assert exc.value.errors()[0]["type"] == "greater_than_equal"


@pytest.mark.parametrize("allocation_type", ["range", "prefix"])
def test_allocation_size_required_for_type(allocation_type):
    with pytest.raises(ValidationError, match="required"):
        PoolDatacenterSettings(type=allocation_type, poolCidr="10.0.0.0/24")


def test_settings_accept_field_names_and_aliases():
    by_alias = PoolDatacenterSettings(
        type="range", poolCidr="10.0.0.0/24", allocationRange=8
    )
    by_name = PoolDatacenterSettings(
        type=AllocationType.RANGE, pool_cidr="10.0.0.0/24", allocation_range=8
    )
    assert by_alias == by_name
    assert by_alias.to_document() == {
        "type": "range",
        "poolCidr": "10.0.0.0/24",
        "allocationRange": 8,
    }


def test_allocation_payload_must_match_type():
    with pytest.raises(ValidationError):
        IPAMAllocation(ipamPoolName="p", type="range", cidr="10.0.0.0/24")


def test_cluster_get_allocation():
    record = IPAMAllocation(ipamPoolName="p", type="prefix", cidr="10.0.0.0/24")
    cluster = Cluster(name="c1", ipamAllocations=[record])

    assert cluster.get_allocation("p") is record
    assert cluster.get_allocation("other") is None
