# hnc_core/data/sizing_policy.py
from __future__ import annotations

import logging
from pathlib import Path

from hnc_core.data.loader import load_yaml_typed
from hnc_core.models.sizing_policy import SizingPolicy

logger = logging.getLogger("hnc.policy")


def load_sizing_policy_typed(path: str | Path | None = None) -> SizingPolicy:
    """Strongly-typed sizing policy loader; a missing file means stock defaults."""
    if path is None:
        return SizingPolicy()
    path = Path(path)
    if not path.exists():
        logger.debug("Sizing policy %s not found, using defaults", path)
        return SizingPolicy()
    return load_yaml_typed(path, model=SizingPolicy)
