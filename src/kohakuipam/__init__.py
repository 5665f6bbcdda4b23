"""
KohakuIPAM: deterministic IP address pool reconciliation for clusters.

Assigns non-overlapping address ranges or subnets to clusters spread across
datacenters from named pool specifications, keeping existing allocations
intact and applying every pass all-or-nothing.
"""

__version__ = "0.1.0"
