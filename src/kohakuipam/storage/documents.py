"""
Document storage for allocation tables and pool specs.

Documents are YAML (.yaml / .yml) or JSON (.json), chosen by file suffix.

Allocation table document:
    datacenters:
      aws-eu-1:
        - name: c1
          ipamAllocations:
            - ipamPoolName: pool1
              cluster: c1
              datacenter: aws-eu-1
              type: range
              addresses: ["192.168.1.0-192.168.1.7"]

Pool spec document:
    name: pool1
    datacenters:
      aws-eu-1:
        type: range
        poolCidr: 192.168.1.0/28
        allocationRange: 8
"""

import json
import os
import shutil
import tempfile

import yaml
from pydantic import BaseModel, ValidationError

from kohakuipam.exceptions import DocumentError
from kohakuipam.models.pool import AllocationTable, DatacenterAllocations, IPAMPool
from kohakuipam.utils.logger import get_logger

logger = get_logger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")
JSON_SUFFIXES = (".json",)


# =============================================================================
# Serialization Helpers
# =============================================================================


def _document_format(path: str) -> str:
    suffix = os.path.splitext(path)[1].lower()
    if suffix in YAML_SUFFIXES:
        return "yaml"
    if suffix in JSON_SUFFIXES:
        return "json"
    raise DocumentError(path, f"unsupported document type '{suffix or path}'")


def dumps(data, fmt: str) -> str:
    """Render plain data as YAML or JSON text."""
    if fmt == "json":
        return json.dumps(data, indent=2) + "\n"
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


def _read(path: str):
    fmt = _document_format(path)
    try:
        with open(path, encoding="utf-8") as f:
            if fmt == "json":
                return json.load(f)
            return yaml.safe_load(f)
    except OSError as e:
        raise DocumentError(path, f"cannot read: {e.strerror or e}")
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DocumentError(path, f"invalid {fmt.upper()}: {e}")


def _validate(path: str, model: type[BaseModel], data):
    if data is None:
        data = {}
    try:
        return model.model_validate(data)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        raise DocumentError(path, f"invalid {model.__name__}: {errors}")


def _write(path: str, text: str, backup: bool) -> None:
    """Write text to path through a temporary sibling file."""
    directory = os.path.dirname(os.path.abspath(path))
    try:
        os.makedirs(directory, exist_ok=True)
        if backup and os.path.exists(path):
            shutil.copy2(path, path + ".bak")
        fd, tmp_path = tempfile.mkstemp(
            dir=directory, prefix=".kohakuipam-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
    except OSError as e:
        raise DocumentError(path, f"cannot write: {e.strerror or e}")


# =============================================================================
# Public API
# =============================================================================


def load_pool(path: str) -> IPAMPool:
    """
    Load a pool spec document.

    Raises:
        DocumentError: If the file cannot be read or is not a valid pool spec.
    """
    pool = _validate(path, IPAMPool, _read(path))
    logger.debug(f"Loaded pool '{pool.name}' from {path}")
    return pool


def load_table(path: str, missing_ok: bool = False) -> DatacenterAllocations:
    """
    Load an allocation table document.

    Args:
        path: Document path.
        missing_ok: Return an empty table when the file does not exist.

    Raises:
        DocumentError: If the file cannot be read or is not a valid table.
    """
    if missing_ok and not os.path.exists(path):
        logger.debug(f"Allocation table {path} does not exist, starting empty")
        return {}
    table = _validate(path, AllocationTable, _read(path))
    logger.debug(
        f"Loaded allocation table from {path}: "
        f"{len(table.datacenters)} datacenter(s)"
    )
    return table.datacenters


def table_to_document(datacenter_allocations: DatacenterAllocations) -> dict:
    """Convert an allocation table into plain document data."""
    return AllocationTable(datacenters=datacenter_allocations).to_document()


def save_table(
    path: str, datacenter_allocations: DatacenterAllocations, backup: bool = True
) -> None:
    """
    Save an allocation table document, replacing the file atomically.

    Args:
        path: Document path; its suffix selects YAML or JSON.
        datacenter_allocations: Table to save.
        backup: Copy the previous file to "<path>.bak" first.

    Raises:
        DocumentError: If the file cannot be written.
    """
    text = dumps(table_to_document(datacenter_allocations), _document_format(path))
    _write(path, text, backup)
    logger.debug(f"Saved allocation table to {path}")
