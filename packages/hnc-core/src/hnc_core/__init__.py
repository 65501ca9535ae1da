"""Leaf-spine fabric sizing: value types, loaders, and the topology deriver."""

__version__ = "0.3.0"
