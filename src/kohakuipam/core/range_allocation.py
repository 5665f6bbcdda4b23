"""
Range allocation: fixed counts of individual addresses.

A range allocation takes the first N free addresses of the pool CIDR in
ascending order and stores them as the minimal ordered list of contiguous
"first-last" strings. Later, longer runs are never preferred over earlier
short ones, so results are reproducible and usage compacts toward the low
end of the pool.

Example (192.168.1.0/28, .2 and .3 already used, N=4):
    ["192.168.1.0-192.168.1.1", "192.168.1.4-192.168.1.5"]
"""

from __future__ import annotations

from collections.abc import Iterator
from itertools import islice

from kohakuipam.core.usage import UsageTracker
from kohakuipam.exceptions import CapacityError
from kohakuipam.models.address import (
    IPAddress,
    IPNetwork,
    contains,
    format_range,
    is_successor,
    iter_addresses,
    iter_range,
    parse_range,
)


AddressRange = tuple[IPAddress, IPAddress]


def parse_address_ranges(address_ranges: list[str]) -> list[AddressRange]:
    """
    Parse "first-last" strings into (first, last) pairs, in order.

    Raises:
        ParseError: If a range string is malformed.
    """
    return [parse_range(address_range) for address_range in address_ranges]


def count_addresses(ranges: list[AddressRange]) -> int:
    """Number of distinct addresses covered by ranges, without expanding them."""
    total = 0
    end = None
    for first, last in sorted((int(first), int(last)) for first, last in ranges):
        if end is not None and first <= end:
            # Overlaps the previous run
            if last > end:
                total += last - end
                end = last
            continue
        total += last - first + 1
        end = last
    return total


def expand_address_ranges(address_ranges: list[str]) -> list[IPAddress]:
    """
    Expand "first-last" strings into their member addresses, in order.

    Raises:
        ParseError: If a range string is malformed.
    """
    addresses = []
    for first, last in parse_address_ranges(address_ranges):
        addresses.extend(iter_range(first, last))
    return addresses


def check_range_allocation(
    ranges: list[AddressRange], pool_network: IPNetwork, allocation_range: int
) -> str | None:
    """
    Check an existing range allocation against new pool settings.

    Works on range bounds only, so the cost depends on the number of ranges
    and not on how many addresses they span.

    Returns:
        None if compatible, otherwise the reason it is not.
    """
    for first, last in ranges:
        if not (contains(pool_network, first) and contains(pool_network, last)):
            return (
                f"address range {format_range(first, last)} is outside "
                f"pool CIDR {pool_network}"
            )
    distinct = count_addresses(ranges)
    if distinct != allocation_range:
        return (
            f"holds {distinct} addresses, "
            f"pool allocates {allocation_range}"
        )
    return None


def iter_free_addresses(
    datacenter: str,
    pool_name: str,
    pool_network: IPNetwork,
    tracker: UsageTracker,
) -> Iterator[IPAddress]:
    """Yield the unused addresses of pool_network in ascending order."""
    for address in iter_addresses(pool_network):
        if not tracker.is_used(datacenter, pool_name, str(address)):
            yield address


def find_free_ranges(
    datacenter: str,
    pool_name: str,
    pool_network: IPNetwork,
    count: int,
    tracker: UsageTracker,
) -> list[str]:
    """
    Take the first count free addresses of the pool and mark them used.

    Args:
        datacenter: Datacenter of the usage space.
        pool_name: Pool of the usage space.
        pool_network: Parsed pool CIDR.
        count: Number of addresses to take.
        tracker: Usage of the current pass, updated in place.

    Returns:
        Ordered "first-last" strings, one per maximal contiguous run.

    Raises:
        CapacityError: If fewer than count free addresses remain. The
            tracker is left untouched in that case.
    """
    free = iter_free_addresses(datacenter, pool_name, pool_network, tracker)
    taken = list(islice(free, count))
    if len(taken) < count:
        raise CapacityError(pool_name, datacenter, count, len(taken))

    address_ranges: list[str] = []
    first = previous = None
    for address in taken:
        tracker.mark_used(datacenter, pool_name, str(address))
        if first is None:
            first = address
        elif not is_successor(address, previous):
            address_ranges.append(format_range(first, previous))
            first = address
        previous = address
    if first is not None:
        address_ranges.append(format_range(first, previous))

    return address_ranges
