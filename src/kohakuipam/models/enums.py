"""
Enumeration types for KohakuIPAM.

This module defines the enumeration types shared by the engine, the document
layer and the CLI.
"""

from enum import Enum


# =============================================================================
# Allocation Enums
# =============================================================================


class AllocationType(str, Enum):
    """
    Allocation strategy of a pool in one datacenter.

    - RANGE: A fixed count of individual addresses, stored as "first-last" ranges
    - PREFIX: One subnet of a fixed prefix length, stored as a CIDR
    """

    RANGE = "range"
    PREFIX = "prefix"


# =============================================================================
# Configuration Enums
# =============================================================================


class LogLevel(str, Enum):
    """
    Logging verbosity levels for KohakuIPAM.

    Levels (from most to least verbose):
        - FULL: Complete trace with detailed stack information
        - DEBUG: Debug messages and above
        - INFO: Informational messages and above
        - WARNING: Only warnings and errors
    """

    FULL = "full"
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"


class OutputFormat(str, Enum):
    """Output format for CLI commands."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"
