import pytest

from kohakuipam.core.prefix_allocation import (
    check_prefix_allocation,
    find_free_subnet,
)
from kohakuipam.core.usage import UsageTracker
from kohakuipam.exceptions import ExhaustionError, InvalidPrefixError
from kohakuipam.models.address import parse_network

DC = "dc1"
POOL = "pool1"


def test_first_subnet_is_pool_start():
    tracker = UsageTracker()
    subnet = find_free_subnet(DC, POOL, parse_network("192.168.0.0/16"), 28, tracker)
    assert subnet == "192.168.0.0/28"


def test_does_not_mark_used():
    tracker = UsageTracker()
    network = parse_network("192.168.0.0/16")

    first = find_free_subnet(DC, POOL, network, 28, tracker)
    again = find_free_subnet(DC, POOL, network, 28, tracker)

    assert first == again
    assert len(tracker) == 0


def test_skips_used_subnets():
    tracker = UsageTracker()
    tracker.mark_used(DC, POOL, "192.168.0.0/28")
    tracker.mark_used(DC, POOL, "192.168.0.32/28")
    network = parse_network("192.168.0.0/16")

    assert find_free_subnet(DC, POOL, network, 28, tracker) == "192.168.0.16/28"
    tracker.mark_used(DC, POOL, "192.168.0.16/28")
    assert find_free_subnet(DC, POOL, network, 28, tracker) == "192.168.0.48/28"


def test_pool_cidr_with_host_bits_starts_at_network():
    tracker = UsageTracker()
    subnet = find_free_subnet(DC, POOL, parse_network("10.0.0.77/24"), 26, tracker)
    assert subnet == "10.0.0.0/26"


def test_exhaustion():
    tracker = UsageTracker()
    network = parse_network("192.168.0.0/30")
    for _ in range(2):
        tracker.mark_used(DC, POOL, find_free_subnet(DC, POOL, network, 31, tracker))

    with pytest.raises(ExhaustionError) as exc:
        find_free_subnet(DC, POOL, network, 31, tracker)
    assert exc.value.prefix == 31


@pytest.mark.parametrize("prefix", [27, 33])
def test_invalid_prefix(prefix):
    with pytest.raises(InvalidPrefixError):
        find_free_subnet(DC, POOL, parse_network("192.168.1.0/28"), prefix, UsageTracker())


def test_ipv6_subnets():
    tracker = UsageTracker()
    network = parse_network("fd00::/48")
    tracker.mark_used(DC, POOL, find_free_subnet(DC, POOL, network, 64, tracker))
    assert find_free_subnet(DC, POOL, network, 64, tracker) == "fd00:0:0:1::/64"


def test_check_prefix_allocation_compatible():
    assert (
        check_prefix_allocation(
            parse_network("192.168.0.16/28"), parse_network("192.168.0.0/16"), 28
        )
        is None
    )


@pytest.mark.parametrize(
    "subnet, pool, prefix",
    [
        ("192.168.0.0/28", "192.168.0.0/16", 29),  # different prefix
        ("192.168.0.0/28", "192.168.0.0/29", 28),  # coarser than pool
        ("192.169.0.0/28", "192.168.0.0/16", 28),  # outside pool
        ("fd00::/64", "192.168.0.0/16", 64),  # other IP version
    ],
)
def test_check_prefix_allocation_incompatible(subnet, pool, prefix):
    assert check_prefix_allocation(parse_network(subnet), parse_network(pool), prefix)
