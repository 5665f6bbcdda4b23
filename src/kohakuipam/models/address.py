"""
Address-space arithmetic for IPAM pools.

Pure helpers over IPv4/IPv6 addresses and networks built on the standard
ipaddress module. Networks are always masked to their prefix on parse, so
"192.168.1.5/24" is treated as 192.168.1.0/24.

String forms:
- Range:  "<first>-<last>" (a single address is "<ip>-<ip>")
- Subnet: "<network>/<prefix>"

Examples:
    >>> net = parse_network("192.168.1.0/28")
    >>> format_range(net.network_address, successor(net.network_address))
    '192.168.1.0-192.168.1.1'
    >>> [str(s) for s in iter_subnets(parse_network("10.0.0.0/30"), 31)]
    ['10.0.0.0/31', '10.0.0.2/31']
"""

from __future__ import annotations

import ipaddress
from collections.abc import Iterator

from kohakuipam.exceptions import ParseError

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address
IPNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network


# =============================================================================
# Parsing
# =============================================================================


def parse_address(text: str) -> IPAddress:
    """
    Parse a single IP address.

    Scoped IPv6 text ("fe80::1%eth0") is rejected.

    Raises:
        ParseError: If text is not an unscoped IPv4 or IPv6 address.
    """
    try:
        address = ipaddress.ip_address(text.strip())
    except (ValueError, AttributeError):
        raise ParseError(str(text), "address")
    if getattr(address, "scope_id", None):
        raise ParseError(text, "address")
    return address


def parse_network(text: str) -> IPNetwork:
    """
    Parse a CIDR block, masking host bits to the prefix.

    A CIDR is required: a bare address is rejected instead of being read
    as a host route.

    Raises:
        ParseError: If text is not "<address>/<prefix>".
    """
    if not isinstance(text, str) or "/" not in text:
        raise ParseError(str(text), "CIDR")
    try:
        network = ipaddress.ip_network(text.strip(), strict=False)
    except ValueError:
        raise ParseError(text, "CIDR")
    if getattr(network.network_address, "scope_id", None):
        raise ParseError(text, "CIDR")
    return network


def parse_range(text: str) -> tuple[IPAddress, IPAddress]:
    """
    Parse a "<first>-<last>" address range.

    Raises:
        ParseError: If either bound is malformed, the bounds mix IP versions,
            or last comes before first.
    """
    first_text, sep, last_text = str(text).partition("-")
    if not sep:
        raise ParseError(str(text), "address range")
    try:
        first = parse_address(first_text)
        last = parse_address(last_text)
    except ParseError:
        raise ParseError(text, "address range")
    if first.version != last.version or last < first:
        raise ParseError(text, "address range")
    return first, last


# =============================================================================
# Arithmetic
# =============================================================================


def address_bits(value: IPAddress | IPNetwork) -> int:
    """Total width in bits of the address space (32 or 128)."""
    return value.max_prefixlen


def mask_address(address: IPAddress, prefix: int) -> IPAddress:
    """Clear every bit of address past the first prefix bits."""
    bits = address_bits(address)
    mask = ((1 << prefix) - 1) << (bits - prefix)
    return type(address)(int(address) & mask)


def successor(address: IPAddress) -> IPAddress:
    """Next address, wrapping within the fixed width of the address space."""
    bits = address_bits(address)
    return type(address)((int(address) + 1) % (1 << bits))


def is_successor(candidate: IPAddress, previous: IPAddress) -> bool:
    """Whether candidate directly follows previous."""
    return candidate.version == previous.version and candidate == successor(
        previous
    )


def subnet_size(prefix: int, bits: int) -> int:
    """Number of addresses in a /prefix block of a bits-wide space."""
    return 1 << (bits - prefix)


def contains(network: IPNetwork, item: IPAddress | IPNetwork) -> bool:
    """
    Whether network contains an address or a whole network.

    Mixed IP versions are never contained.
    """
    if network.version != item.version:
        return False
    if isinstance(item, (ipaddress.IPv4Network, ipaddress.IPv6Network)):
        return item.subnet_of(network)
    return item in network


# =============================================================================
# Enumeration
# =============================================================================


def iter_addresses(network: IPNetwork) -> Iterator[IPAddress]:
    """Yield every address of network in ascending order, network/broadcast included."""
    address_cls = type(network.network_address)
    first = int(network.network_address)
    for offset in range(network.num_addresses):
        yield address_cls(first + offset)


def iter_range(first: IPAddress, last: IPAddress) -> Iterator[IPAddress]:
    """Yield first..last inclusive, nothing if last comes before first."""
    address_cls = type(first)
    for value in range(int(first), int(last) + 1):
        yield address_cls(value)


def iter_subnets(network: IPNetwork, prefix: int) -> Iterator[IPNetwork]:
    """
    Yield the /prefix subnets of network in ascending order.

    Successive candidates advance by the subnet size, starting from the
    masked network address, while they stay inside network.
    """
    network_cls = type(network)
    address_cls = type(network.network_address)
    stride = subnet_size(prefix, address_bits(network))
    start = int(network.network_address)
    end = int(network.broadcast_address)
    for base in range(start, end + 1, stride):
        yield network_cls((address_cls(base), prefix))


# =============================================================================
# Formatting
# =============================================================================


def format_range(first: IPAddress, last: IPAddress) -> str:
    """Format an address range as "<first>-<last>"."""
    return f"{first}-{last}"


def format_subnet(network_address: IPAddress, prefix: int) -> str:
    """Format a subnet as "<network>/<prefix>" after masking the address."""
    return f"{mask_address(network_address, prefix)}/{prefix}"
