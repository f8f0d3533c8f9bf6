"""Muscle group taxonomy: mapping raw labels to canonical main groups."""

import re
from collections.abc import Callable

MuscleGroupMapper = Callable[[str], str]

MAIN_MUSCLE_GROUPS = (
    "Chest",
    "Back",
    "Legs",
    "Shoulders",
    "Arms",
    "Core",
    "Cardio",
    "Full Body",
)

# Sub-group and synonym labels, lowercase, mapped to their main group
SUB_GROUP_MAPPING = {
    # Legs
    "legs": "Legs",
    "quadriceps": "Legs",
    "quads": "Legs",
    "hamstrings": "Legs",
    "glutes": "Legs",
    "calves": "Legs",
    "adductors": "Legs",
    "abductors": "Legs",
    # Arms
    "arms": "Arms",
    "biceps": "Arms",
    "triceps": "Arms",
    "forearms": "Arms",
    # Back
    "back": "Back",
    "lats": "Back",
    "traps": "Back",
    "lower back": "Back",
    "upper back": "Back",
    "rhomboids": "Back",
    # Chest
    "chest": "Chest",
    "pecs": "Chest",
    "upper chest": "Chest",
    # Shoulders
    "shoulders": "Shoulders",
    "delts": "Shoulders",
    "front delts": "Shoulders",
    "side delts": "Shoulders",
    "rear delts": "Shoulders",
    # Core
    "core": "Core",
    "abs": "Core",
    "obliques": "Core",
    # Others
    "cardio": "Cardio",
    "full body": "Full Body",
}


def normalize_label(label: str) -> str:
    """Lowercase a label and collapse separators to single spaces."""
    normalized = label.lower().strip()
    normalized = re.sub(r"[\s_\-]+", " ", normalized)
    return normalized


def map_to_main_group(raw_label: str) -> str:
    """Map a raw or sub-group label to its canonical main group.

    Unknown labels are returned stripped but otherwise unchanged, so a
    custom group still compares equal to itself.
    """
    if not raw_label:
        return ""
    return SUB_GROUP_MAPPING.get(normalize_label(raw_label), raw_label.strip())
