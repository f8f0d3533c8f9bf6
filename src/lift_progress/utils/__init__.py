"""Utilities for lift-progress."""

from .muscle_groups import MAIN_MUSCLE_GROUPS, MuscleGroupMapper, map_to_main_group

__all__ = ["MAIN_MUSCLE_GROUPS", "MuscleGroupMapper", "map_to_main_group"]
