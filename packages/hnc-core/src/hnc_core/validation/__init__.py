from .topology import class_leaf_count, derive_topology, validate_guards

__all__ = ["class_leaf_count", "derive_topology", "validate_guards"]
