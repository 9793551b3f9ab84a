"""PoX stake registry lookups."""

from .mapper import StakeRegistryIndex, StakeRegistryMapper

__all__ = ["StakeRegistryIndex", "StakeRegistryMapper"]
