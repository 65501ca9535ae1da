"""
Switch profile catalog loader.

A catalog is either a directory holding one profile document per file
(``*.yaml``, ``*.yml`` or ``*.json``), or a single YAML file containing a list
of profiles or a mapping of model id to profile. The result is a plain
``dict`` keyed by model id; the allocation engine only reads it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from pydantic import TypeAdapter

from hnc_core.data.loader import load_yaml_typed, read_yaml_raw, validate_yaml_data
from hnc_core.models.switch_profile import SwitchProfile

PROFILE_SUFFIXES = {".yaml", ".yml", ".json"}

logger = logging.getLogger("hnc.catalog")


def load_switch_profile(path: str | Path) -> SwitchProfile:
    """Load a single switch profile document."""
    return load_yaml_typed(Path(path), model=SwitchProfile)


def _index_by_model(profiles: Iterable[SwitchProfile], source: Path) -> dict[str, SwitchProfile]:
    catalog: dict[str, SwitchProfile] = {}
    for profile in profiles:
        if profile.model_id in catalog:
            raise ValueError(f"Duplicate switch profile for model {profile.model_id} in {source}")
        catalog[profile.model_id] = profile
    return catalog


def _is_single_profile(raw: object) -> bool:
    return isinstance(raw, dict) and ("modelId" in raw or "model_id" in raw)


def load_switch_profiles(path: str | Path) -> dict[str, SwitchProfile]:
    """
    Load a switch profile catalog.

    Args:
        path: Directory of profile files, or a YAML file with a list or mapping of profiles

    Returns:
        Mapping of model id to validated switch profile

    Raises:
        ValueError: If a profile is malformed, duplicated, or filed under the wrong model id
        FileNotFoundError: If the path doesn't exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Profile catalog not found: {path}")

    if path.is_dir():
        files = sorted(p for p in path.iterdir() if p.is_file() and p.suffix.lower() in PROFILE_SUFFIXES)
        catalog = _index_by_model((load_switch_profile(f) for f in files), source=path)
    elif _is_single_profile(raw := read_yaml_raw(path)):
        catalog = _index_by_model([validate_yaml_data(raw, TypeAdapter(SwitchProfile), path)], source=path)
    elif isinstance(raw, dict):
        mapping = validate_yaml_data(raw, TypeAdapter(dict[str, SwitchProfile]), path)
        for model_id, profile in mapping.items():
            if profile.model_id != model_id:
                raise ValueError(f"Profile modelId mismatch: expected {model_id}, got {profile.model_id}")
        catalog = dict(mapping)
    else:
        catalog = _index_by_model(validate_yaml_data(raw, TypeAdapter(list[SwitchProfile]), path), source=path)

    logger.debug("Loaded %d switch profiles from %s", len(catalog), path)
    return catalog


def dump_switch_profiles(catalog: dict[str, SwitchProfile]) -> list[dict]:
    """Wire-format view of a catalog, sorted by model id."""
    adapter = TypeAdapter(list[SwitchProfile])
    return adapter.dump_python([catalog[k] for k in sorted(catalog)], by_alias=True, mode="json")
