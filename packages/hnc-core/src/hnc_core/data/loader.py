"""
Typed YAML loading shared by every hnc document reader.

All files go through :func:`read_yaml_raw`, so missing files, undecodable
text, malformed YAML and empty documents fail the same way everywhere.
JSON documents load too, since JSON is a YAML subset.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter, ValidationError

def read_yaml_raw(path: Path | str) -> Any:
    """Parse a YAML file into plain Python data."""
    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"File not found: {source}")

    try:
        text = source.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ValueError(f"Unable to decode UTF-8 in {source}: {e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {source}: {e}") from e

    if data is None:
        raise ValueError(f"Empty YAML file: {source}")
    return data


def validate_yaml_data[T](data: Any, adapter: TypeAdapter[T], source: Path | str) -> T:
    """Validate already-parsed YAML data, naming ``source`` on failure."""
    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        # Callers only see ValueError, with the offending file named
        raise ValueError(f"Invalid structure in {source}: {e}") from e


def load_yaml_typed[T](path: Path | str, *, model: type[T]) -> T:
    """Read a YAML document and validate it as ``model``::

        load_yaml_typed("fabrics/prod.yaml", model=FabricSpec)
    """
    return validate_yaml_data(read_yaml_raw(path), TypeAdapter(model), path)
