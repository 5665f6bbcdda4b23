"""
Configuration for KohakuIPAM.

A global config instance that can be modified at runtime. Values may also be
taken from the environment with IPAMConfig.from_env(), and CLI options
override both.

Usage:
    from kohakuipam.config import config

    config.TABLE_FILE = "/etc/kohakuipam/allocations.yaml"
    config.LOG_LEVEL = LogLevel.DEBUG
"""

import os
from dataclasses import dataclass, fields

from kohakuipam.models.enums import LogLevel, OutputFormat

ENV_PREFIX = "KOHAKUIPAM_"


@dataclass
class IPAMConfig:
    """
    KohakuIPAM configuration.

    Attributes:
        TABLE_FILE: Datacenter allocation table document (YAML or JSON).
        LOG_LEVEL: Logging verbosity level.
        LOG_FILE: Log file path (empty = console only).
        OUTPUT_FORMAT: Default output format of CLI commands.
        BACKUP_ON_WRITE: Keep a .bak copy of the previous table on save.
    """

    # Path Configuration
    TABLE_FILE: str = "allocations.yaml"

    # Logging Configuration
    LOG_LEVEL: LogLevel = LogLevel.INFO
    LOG_FILE: str = ""

    # Output Configuration
    OUTPUT_FORMAT: OutputFormat = OutputFormat.TABLE
    BACKUP_ON_WRITE: bool = True

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "IPAMConfig":
        """Build a configuration from defaults plus KOHAKUIPAM_* variables."""
        cfg = cls()
        cfg.load_env(environ)
        return cfg

    def load_env(self, environ: dict[str, str] | None = None) -> None:
        """
        Overlay KOHAKUIPAM_* environment variables onto this configuration.

        Unset variables leave the current value untouched.

        Raises:
            ValueError: If a variable cannot be converted to its field type.
        """
        environ = os.environ if environ is None else environ
        for f in fields(self):
            raw = environ.get(ENV_PREFIX + f.name)
            if raw is None:
                continue
            setattr(self, f.name, _convert(f.name, getattr(self, f.name), raw))

    def sources(self, environ: dict[str, str] | None = None) -> dict[str, str]:
        """Return "env" or "default" per field, for display."""
        environ = os.environ if environ is None else environ
        return {
            f.name: "env" if ENV_PREFIX + f.name in environ else "default"
            for f in fields(self)
        }


def _convert(name: str, current, raw: str):
    if isinstance(current, bool):
        lowered = raw.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ValueError(f"Invalid boolean for {ENV_PREFIX}{name}: '{raw}'")
    if isinstance(current, (LogLevel, OutputFormat)):
        try:
            return type(current)(raw.strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in type(current))
            raise ValueError(
                f"Invalid value for {ENV_PREFIX}{name}: '{raw}'. "
                f"Expected one of: {choices}"
            )
    return raw


config = IPAMConfig()
