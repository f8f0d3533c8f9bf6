"""Tests for data models."""

from datetime import datetime, timezone

import pytest

from lift_progress.models import (
    ChartPoint,
    MetricType,
    ProgressError,
    ResolutionPhase,
    ResolutionReason,
    ResolverState,
    SelectionState,
    ServiceResult,
    TargetKey,
    WorkoutEntry,
)
from lift_progress.models.workout import parse_timestamp


class TestWorkoutEntry:
    """Tests for WorkoutEntry model."""

    def test_volume_weighted(self, make_entry):
        """Test volume of a weighted entry."""
        assert make_entry(weight=60, reps=5, sets=3).volume == 900

    def test_volume_bodyweight(self, make_entry):
        """Test volume of a bodyweight entry."""
        entry = make_entry(weight=0, reps=12, sets=3)
        assert entry.is_bodyweight
        assert entry.volume == 36

    def test_entry_to_dict(self, make_entry):
        """Test entry serialization."""
        data = make_entry(entry_id="abc", user_id="u1").to_dict()

        assert data["id"] == "abc"
        assert data["exercise"] == "Bench Press"
        assert data["muscle_group"] == "Chest"
        assert data["sets"] == 3
        assert data["user_id"] == "u1"

    def test_entry_from_dict(self):
        """Test entry deserialization with alias fields."""
        entry = WorkoutEntry.from_dict(
            {
                "id": 7,
                "date": "2024-06-10T18:00:00Z",
                "muscleGroup": "Quadriceps",
                "exercise_name": "Squat",
                "sets": "5",
                "reps": 5,
                "weight": 100,
            }
        )

        assert entry.id == "7"
        assert entry.muscle_group_raw == "Quadriceps"
        assert entry.exercise_name == "Squat"
        assert entry.set_count == 5
        assert entry.parsed_timestamp == datetime(2024, 6, 10, 18, tzinfo=timezone.utc)

    def test_entry_from_dict_bad_numbers_default_to_zero(self):
        """Test that unusable numbers deserialize as zero."""
        entry = WorkoutEntry.from_dict(
            {"exercise": "Plank", "sets": None, "reps": "many", "weight": True}
        )
        assert entry.set_count == 0
        assert entry.reps_per_set == 0
        assert entry.weight_per_rep == 0

    def test_entry_from_dict_null_id_left_empty(self):
        """Test that a null ID is left empty so storage generates one."""
        entry = WorkoutEntry.from_dict({"id": None, "exercise": "Squat"})
        assert entry.id == ""

    def test_entry_from_dict_requires_exercise(self):
        """Test that an exercise name is required."""
        with pytest.raises(ValueError):
            WorkoutEntry.from_dict({"sets": 3})

    def test_parse_timestamp(self):
        """Test timestamp parsing."""
        assert parse_timestamp("2024-06-10") == datetime(2024, 6, 10)
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp(None) is None


class TestChartPoint:
    """Tests for ChartPoint model."""

    def test_value_by_metric(self):
        """Test reading a point by metric."""
        point = ChartPoint(date=datetime(2024, 6, 1), peak_weight=65, total_volume=1875)

        assert point.value(MetricType.WEIGHT) == 65
        assert point.value(MetricType.VOLUME) == 1875
        assert point.to_dict()["date"] == "2024-06-01T00:00:00"


class TestTargetKey:
    """Tests for composite target keys."""

    def test_storage_key(self):
        """Test composite key serialization."""
        assert TargetKey("Bench Press", MetricType.WEIGHT).to_storage_key() == "Bench Press::weight"

    def test_from_storage_key(self):
        """Test composite key parsing."""
        key = TargetKey.from_storage_key("Cable Fly::Low::volume")
        assert key == TargetKey("Cable Fly::Low", MetricType.VOLUME)

    @pytest.mark.parametrize("raw", ["Bench Press", "::weight", "Bench Press::speed"])
    def test_malformed_key(self, raw):
        """Test malformed composite keys."""
        with pytest.raises(ValueError):
            TargetKey.from_storage_key(raw)


class TestSelectionState:
    """Tests for SelectionState model."""

    def test_is_empty(self):
        """Test the empty selection check."""
        assert SelectionState().is_empty
        assert SelectionState(muscle_group="Chest").is_empty
        assert not SelectionState(muscle_group="Chest", exercise_name="Bench Press").is_empty

    def test_round_trip(self):
        """Test selection serialization round trip."""
        state = SelectionState("Chest", "Bench Press", datetime(2024, 6, 1, tzinfo=timezone.utc))
        assert SelectionState.from_dict(state.to_dict()) == state

    @pytest.mark.parametrize(
        "data",
        [None, [], "Chest", {"muscle_group": 3, "exercise": "Bench Press"}],
    )
    def test_malformed_degrades_to_empty(self, data):
        """Test that malformed documents decode as empty."""
        assert SelectionState.from_dict(data) == SelectionState()

    def test_bad_saved_at_ignored(self):
        """Test that an unparsable save time is dropped."""
        state = SelectionState.from_dict(
            {"muscle_group": "Chest", "exercise": "Bench Press", "saved_at": "soon"}
        )
        assert state.saved_at is None
        assert state.exercise_name == "Bench Press"


class TestResolverState:
    """Tests for the tagged resolver state."""

    def test_initial_state(self):
        """Test the initial resolver state."""
        state = ResolverState()
        assert state.phase == ResolutionPhase.UNINITIALIZED
        assert not state.is_resolved
        assert not state.is_manual

    def test_resolved(self):
        """Test a resolved state."""
        state = ResolverState.resolved(ResolutionReason.MANUAL)
        assert state.is_resolved
        assert state.is_manual
        assert "manual" in state.get_status_display()


class TestServiceResult:
    """Tests for ServiceResult."""

    def test_ok(self):
        """Test a successful result."""
        result = ServiceResult.ok([1, 2])
        assert result.success
        assert result.unwrap() == [1, 2]
        assert result.to_dict() == {"success": True, "data": [1, 2]}

    def test_fail(self):
        """Test a failed result."""
        result = ServiceResult.fail("disk full")
        assert not result.success
        assert result.to_dict() == {"success": False, "error": "disk full"}
        with pytest.raises(ProgressError, match="disk full"):
            result.unwrap()
