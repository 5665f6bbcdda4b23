"""
Pydantic models for pool specifications and allocation records.

These models are the in-memory data the engine consumes and mutates, and
also the document format read and written by the storage layer.

Field names are snake_case in Python. The document names (camelCase) are the
aliases, and both forms are accepted on input:

    PoolDatacenterSettings(type="range", poolCidr="10.0.0.0/24", allocationRange=8)
    PoolDatacenterSettings(type="range", pool_cidr="10.0.0.0/24", allocation_range=8)

Model Categories:
    - Pool Spec: IPAMPool and its per-datacenter settings
    - Allocation Records: IPAMAllocation attached to a Cluster
    - Allocation Table: datacenter -> ordered list of clusters
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from kohakuipam.models.enums import AllocationType


class _DocumentModel(BaseModel):
    """Accepts both field names and aliases on input."""

    model_config = ConfigDict(populate_by_name=True)

    def to_document(self) -> dict:
        """Serialize with document (alias) names, dropping unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# Pool Spec Models
# =============================================================================


class PoolDatacenterSettings(_DocumentModel):
    """
    Pool settings for a single datacenter.

    Exactly one of allocation_range / allocation_prefix is meaningful,
    depending on type.
    """

    type: AllocationType = Field(..., description="Allocation strategy")
    pool_cidr: str = Field(
        ..., alias="poolCidr", description="Source CIDR block of the pool"
    )
    allocation_range: int | None = Field(
        default=None,
        ge=1,
        alias="allocationRange",
        description="Addresses per cluster (type=range)",
    )
    allocation_prefix: int | None = Field(
        default=None,
        ge=0,
        alias="allocationPrefix",
        description="Subnet prefix length per cluster (type=prefix)",
    )

    @model_validator(mode="after")
    def _check_type_fields(self) -> "PoolDatacenterSettings":
        if self.type == AllocationType.RANGE:
            if self.allocation_range is None:
                raise ValueError("allocationRange is required for type 'range'")
        elif self.allocation_prefix is None:
            raise ValueError("allocationPrefix is required for type 'prefix'")
        return self


class IPAMPool(_DocumentModel):
    """
    Named pool specification.

    The name identifies allocations made from this pool in earlier passes.
    """

    name: str = Field(..., description="Pool name")
    datacenters: dict[str, PoolDatacenterSettings] = Field(
        default_factory=dict,
        description="Settings per datacenter ID",
    )


# =============================================================================
# Allocation Models
# =============================================================================


class IPAMAllocation(_DocumentModel):
    """
    Address space held by one cluster from one pool.

    Range records carry ordered "first-last" strings in addresses, prefix
    records carry a single cidr.
    """

    pool_name: str = Field(..., alias="ipamPoolName", description="Source pool")
    cluster: str = Field(default="", description="Owning cluster name")
    datacenter: str = Field(default="", description="Datacenter of the cluster")
    type: AllocationType = Field(..., description="Allocation strategy")
    addresses: list[str] | None = Field(
        default=None,
        description='Address ranges "first-last" (type=range)',
    )
    cidr: str | None = Field(default=None, description="Subnet (type=prefix)")

    @model_validator(mode="after")
    def _check_payload(self) -> "IPAMAllocation":
        if self.type == AllocationType.RANGE and self.addresses is None:
            raise ValueError("addresses is required for type 'range'")
        if self.type == AllocationType.PREFIX and not self.cidr:
            raise ValueError("cidr is required for type 'prefix'")
        return self


class Cluster(_DocumentModel):
    """A cluster and the allocations it holds, at most one per pool name."""

    name: str = Field(..., description="Cluster name")
    allocations: list[IPAMAllocation] = Field(
        default_factory=list,
        alias="ipamAllocations",
        description="Allocations in commit order",
    )

    def get_allocation(self, pool_name: str) -> IPAMAllocation | None:
        """Return this cluster's allocation from pool_name, if any."""
        for allocation in self.allocations:
            if allocation.pool_name == pool_name:
                return allocation
        return None


# datacenter ID -> clusters in allocation order
DatacenterAllocations = dict[str, list[Cluster]]


class AllocationTable(_DocumentModel):
    """Document wrapper around DatacenterAllocations."""

    datacenters: DatacenterAllocations = Field(default_factory=dict)
