"""KohakuIPAM exception classes."""


class IPAMError(Exception):
    """Base exception for IPAM operations."""

    pass


class ParseError(IPAMError, ValueError):
    """Malformed address, CIDR or address range string."""

    def __init__(self, value: str, kind: str = "address"):
        self.value = value
        self.kind = kind
        super().__init__(f"Invalid {kind}: '{value}'")


class InvalidPrefixError(IPAMError):
    """Requested subnet prefix lies outside [pool prefix, address bits]."""

    def __init__(self, prefix: int, pool_cidr: str, max_prefix: int):
        self.prefix = prefix
        self.pool_cidr = pool_cidr
        self.max_prefix = max_prefix
        super().__init__(
            f"Invalid prefix /{prefix} for subnet of pool {pool_cidr}: "
            f"must be between /{pool_cidr.split('/')[-1]} and /{max_prefix}"
        )


class IncompatiblePoolError(IPAMError):
    """Existing allocation does not fit the settings being applied."""

    def __init__(self, pool_name: str, datacenter: str, cluster: str, reason: str):
        self.pool_name = pool_name
        self.datacenter = datacenter
        self.cluster = cluster
        self.reason = reason
        super().__init__(
            f"Pool '{pool_name}' is incompatible with the existing allocation "
            f"of cluster '{cluster}' in datacenter '{datacenter}': {reason}"
        )


class CapacityError(IPAMError):
    """Not enough free addresses left in the pool CIDR."""

    def __init__(
        self, pool_name: str, datacenter: str, requested: int, available: int
    ):
        self.pool_name = pool_name
        self.datacenter = datacenter
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough free IPs in pool '{pool_name}' for datacenter "
            f"'{datacenter}': requested {requested}, available {available}"
        )


class ExhaustionError(IPAMError):
    """No free subnet of the requested prefix length left in the pool CIDR."""

    def __init__(self, pool_name: str, datacenter: str, pool_cidr: str, prefix: int):
        self.pool_name = pool_name
        self.datacenter = datacenter
        self.pool_cidr = pool_cidr
        self.prefix = prefix
        super().__init__(
            f"Cannot find a free /{prefix} subnet in {pool_cidr} "
            f"for pool '{pool_name}' in datacenter '{datacenter}'"
        )


class UnknownDatacenterError(IPAMError):
    """Pool spec names a datacenter absent from the allocation table."""

    def __init__(self, datacenter: str, pool_name: str):
        self.datacenter = datacenter
        self.pool_name = pool_name
        super().__init__(
            f"No cluster deployed in datacenter '{datacenter}' "
            f"(referenced by pool '{pool_name}')"
        )


class DocumentError(IPAMError):
    """Allocation table or pool spec document could not be loaded or saved."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")
