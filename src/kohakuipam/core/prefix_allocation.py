"""
Prefix allocation: one subnet of a fixed prefix length per cluster.

Candidates are the /prefix subnets of the pool CIDR, enumerated from the
masked pool address at a stride of 2^(bits - prefix). Usage is tracked by
canonical CIDR string, which is only sound because every candidate of one
pool and datacenter has the same prefix length.
"""

from __future__ import annotations

from kohakuipam.core.usage import UsageTracker
from kohakuipam.exceptions import ExhaustionError, InvalidPrefixError
from kohakuipam.models.address import (
    IPNetwork,
    address_bits,
    contains,
    iter_subnets,
)


def check_subnet_prefix(pool_network: IPNetwork, prefix: int) -> None:
    """
    Validate that /prefix subnets can be carved out of pool_network.

    Raises:
        InvalidPrefixError: If prefix is coarser than the pool or longer
            than the address width.
    """
    bits = address_bits(pool_network)
    if prefix < pool_network.prefixlen or prefix > bits:
        raise InvalidPrefixError(prefix, str(pool_network), bits)


def check_prefix_allocation(
    subnet: IPNetwork, pool_network: IPNetwork, allocation_prefix: int
) -> str | None:
    """
    Check an existing prefix allocation against new pool settings.

    The prefix must match exactly; a coarser or finer subnet is not
    compatible even if it fits in the pool.

    Returns:
        None if compatible, otherwise the reason it is not.
    """
    if subnet.prefixlen != allocation_prefix:
        return (
            f"subnet {subnet} has prefix /{subnet.prefixlen}, "
            f"pool allocates /{allocation_prefix}"
        )
    if subnet.version != pool_network.version:
        return f"subnet {subnet} is outside pool CIDR {pool_network}"
    if not pool_network.prefixlen <= subnet.prefixlen <= address_bits(pool_network):
        return f"prefix /{subnet.prefixlen} does not fit pool CIDR {pool_network}"
    if not contains(pool_network, subnet.network_address):
        return f"subnet {subnet} is outside pool CIDR {pool_network}"
    return None


def find_free_subnet(
    datacenter: str,
    pool_name: str,
    pool_network: IPNetwork,
    prefix: int,
    tracker: UsageTracker,
) -> str:
    """
    Find the first /prefix subnet of the pool not yet used.

    The subnet is not marked used here; the caller marks it once it
    accepts the result.

    Returns:
        Canonical CIDR string of the subnet.

    Raises:
        InvalidPrefixError: If prefix is outside [pool prefix, address bits].
        ExhaustionError: If every candidate subnet is already used.
    """
    check_subnet_prefix(pool_network, prefix)

    for candidate in iter_subnets(pool_network, prefix):
        key = str(candidate)
        if not tracker.is_used(datacenter, pool_name, key):
            return key

    raise ExhaustionError(pool_name, datacenter, str(pool_network), prefix)
