"""
Reconciliation engine for KohakuIPAM.

Re-exports the entry points so callers can write:
    from kohakuipam.core import apply, IPAMReconciler
"""

from kohakuipam.exceptions import (
    CapacityError,
    DocumentError,
    ExhaustionError,
    IncompatiblePoolError,
    InvalidPrefixError,
    IPAMError,
    ParseError,
    UnknownDatacenterError,
)
from kohakuipam.core.reconciler import IPAMReconciler, apply, plan
from kohakuipam.core.report import PoolUsage, summarize_pool_usage
from kohakuipam.core.usage import UsageTracker

__all__ = [
    "IPAMReconciler",
    "apply",
    "plan",
    "PoolUsage",
    "summarize_pool_usage",
    "UsageTracker",
    "IPAMError",
    "ParseError",
    "InvalidPrefixError",
    "IncompatiblePoolError",
    "CapacityError",
    "ExhaustionError",
    "UnknownDatacenterError",
    "DocumentError",
]
