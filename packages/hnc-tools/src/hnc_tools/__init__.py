"""Fabric allocation tools built on hnc_core."""
