"""Tests for default exercise selection."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from lift_progress.config import ResolverConfig
from lift_progress.models import (
    PerformedExercise,
    ResolutionPhase,
    ResolutionReason,
    SelectionState,
)
from lift_progress.services.selection import ExerciseSelectionResolver
from lift_progress.storage import InMemoryProgressStorage
from lift_progress.storage.base import LAST_SELECTION_KEY
from lift_progress.utils import map_to_main_group

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)

PERFORMED = [
    PerformedExercise("Bench Press", "Chest"),
    PerformedExercise("Leg Curl", "Hamstrings"),
    PerformedExercise("Pull Up", "Lats"),
]


class BlockingStorage(InMemoryProgressStorage):
    """Storage whose last-selection load waits until released."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.release = asyncio.Event()
        self.started = asyncio.Event()

    async def load_last_selection(self):
        self.started.set()
        await self.release.wait()
        return await super().load_last_selection()


def remembered(muscle_group: str, exercise: str, saved_at: datetime | None = None) -> dict:
    return {
        LAST_SELECTION_KEY: SelectionState(muscle_group, exercise, saved_at).to_dict()
    }


@pytest.fixture
def storage():
    return InMemoryProgressStorage(clock=lambda: NOW)


@pytest.fixture
def resolver(storage):
    return ExerciseSelectionResolver(storage, clock=lambda: NOW)


class TestResolveDefaultSelection:
    """Tests for resolution precedence."""

    async def test_fallback_to_first_performed(self, resolver):
        """Test fallback to the first performed exercise."""
        selection = await resolver.resolve_default_selection(
            [PerformedExercise("Bench Press", "Chest")]
        )

        assert selection.muscle_group == "Chest"
        assert selection.exercise_name == "Bench Press"
        assert resolver.state.reason == ResolutionReason.FALLBACK

    async def test_fallback_uses_main_group(self, resolver):
        """Test that fallback uses the main muscle group."""
        selection = await resolver.resolve_default_selection(PERFORMED[1:])

        assert selection.muscle_group == "Legs"
        assert selection.exercise_name == "Leg Curl"

    async def test_last_known_selection(self, storage, resolver):
        """Test resolving to the remembered selection."""
        storage.documents.update(remembered("Legs", "Leg Curl"))

        selection = await resolver.resolve_default_selection(PERFORMED)

        assert selection == SelectionState("Legs", "Leg Curl")
        assert resolver.state.reason == ResolutionReason.LAST_KNOWN

    async def test_last_known_compared_by_main_group(self, storage, resolver):
        """Test that remembered groups compare by main group."""
        storage.documents.update(remembered("Quadriceps", "Leg Curl"))

        selection = await resolver.resolve_default_selection(PERFORMED)

        assert selection.muscle_group == "Legs"
        assert resolver.state.reason == ResolutionReason.LAST_KNOWN

    async def test_last_known_not_performed_falls_back(self, storage, resolver):
        """Test last known not performed falls back."""
        storage.documents.update(remembered("Chest", "Cable Fly"))

        selection = await resolver.resolve_default_selection(PERFORMED)

        assert selection.exercise_name == "Bench Press"
        assert resolver.state.reason == ResolutionReason.FALLBACK

    async def test_last_known_group_mismatch_falls_back(self, storage, resolver):
        """Test last known group mismatch falls back."""
        storage.documents.update(remembered("Back", "Leg Curl"))

        await resolver.resolve_default_selection(PERFORMED)

        assert resolver.state.reason == ResolutionReason.FALLBACK

    async def test_failed_load_falls_back(self, storage, resolver):
        """Test failed load falls back."""
        storage.documents.update(remembered("Legs", "Leg Curl"))
        storage.failing.add("load_last_selection")

        selection = await resolver.resolve_default_selection(PERFORMED)

        assert selection.exercise_name == "Bench Press"

    async def test_malformed_saved_selection_falls_back(self, storage, resolver):
        """Test malformed saved selection falls back."""
        storage.documents[LAST_SELECTION_KEY] = ["Leg Curl"]

        selection = await resolver.resolve_default_selection(PERFORMED)

        assert selection.exercise_name == "Bench Press"

    async def test_empty_list_stays_unresolved(self, storage, resolver):
        """Test empty list stays unresolved."""
        selection = await resolver.resolve_default_selection([])

        assert selection.is_empty
        assert resolver.state.phase == ResolutionPhase.UNINITIALIZED
        assert storage.calls == []

    async def test_latched_after_resolution(self, storage, resolver):
        """Test that resolution runs only once."""
        await resolver.resolve_default_selection(PERFORMED[:1])
        storage.documents.update(remembered("Legs", "Leg Curl"))

        selection = await resolver.resolve_default_selection(PERFORMED)

        assert selection.exercise_name == "Bench Press"
        assert storage.calls == ["load_last_selection"]

    async def test_same_size_list_not_reresolved(self):
        """Test that a same-size list does not start another load."""
        blocking = BlockingStorage()
        resolver = ExerciseSelectionResolver(blocking)

        task = asyncio.create_task(resolver.resolve_default_selection(list(PERFORMED)))
        await blocking.started.wait()
        # A new list object of the same size does not start another load
        await resolver.resolve_default_selection(list(PERFORMED))
        blocking.release.set()
        await task

        assert blocking.calls == ["load_last_selection"]
        assert resolver.state.reason == ResolutionReason.FALLBACK


class TestManualSelection:
    """Tests for manual selections."""

    async def test_manual_choice_never_overwritten(self, storage, resolver):
        """Test manual choice never overwritten."""
        await resolver.resolve_default_selection([PerformedExercise("Bench Press", "Chest")])
        resolver.select_muscle_group("Legs")
        resolver.select_exercise("Leg Curl")

        storage.documents.update(remembered("Chest", "Bench Press"))
        selection = await resolver.resolve_default_selection(PERFORMED)
        await resolver.aclose()

        assert selection == SelectionState("Legs", "Leg Curl")
        assert resolver.state.is_manual

    async def test_manual_choice_during_load_wins(self):
        """Test manual choice during load wins."""
        storage = BlockingStorage(documents=remembered("Legs", "Leg Curl"))
        resolver = ExerciseSelectionResolver(storage)

        task = asyncio.create_task(resolver.resolve_default_selection(PERFORMED))
        await storage.started.wait()
        assert resolver.state.phase == ResolutionPhase.RESOLVING

        resolver.select_muscle_group("Back")
        resolver.select_exercise("Pull Up")
        storage.release.set()
        selection = await task
        await resolver.aclose()

        assert selection == SelectionState("Back", "Pull Up")
        assert resolver.state.reason == ResolutionReason.MANUAL

    async def test_manual_before_resolution_skips_load(self, storage, resolver):
        """Test manual before resolution skips load."""
        resolver.select_muscle_group("Chest")

        await resolver.resolve_default_selection(PERFORMED)

        assert "load_last_selection" not in storage.calls

    async def test_selecting_group_clears_exercise(self, resolver):
        """Test selecting group clears exercise."""
        await resolver.resolve_default_selection(PERFORMED)

        selection = resolver.select_muscle_group("Legs")

        assert selection.muscle_group == "Legs"
        assert selection.exercise_name == ""

    async def test_selected_exercise_is_remembered(self, storage, resolver):
        """Test selected exercise is remembered."""
        resolver.select_muscle_group("Legs")
        resolver.select_exercise("Leg Curl")
        assert resolver.has_pending_writes

        await resolver.aclose()

        assert not resolver.has_pending_writes
        assert storage.documents[LAST_SELECTION_KEY] == {
            "muscle_group": "Legs",
            "exercise": "Leg Curl",
            "saved_at": NOW.isoformat(),
        }

    async def test_exercise_without_group_not_remembered(self, storage, resolver):
        """Test exercise without group not remembered."""
        resolver.select_exercise("Leg Curl")
        await resolver.aclose()

        assert "save_last_selection" not in storage.calls
        assert resolver.exercise_name == "Leg Curl"

    async def test_failed_write_is_not_surfaced(self, storage, resolver, caplog):
        """Test that a failed write is logged, not raised."""
        storage.failing.add("save_last_selection")

        resolver.select_muscle_group("Legs")
        selection = resolver.select_exercise("Leg Curl")
        await resolver.aclose()

        assert selection.exercise_name == "Leg Curl"
        assert "Remembering selection failed" in caplog.text


class TestSelectionExpiry:
    """Tests for the optional maximum age of a remembered selection."""

    async def test_expired_selection_ignored(self, storage):
        """Test expired selection ignored."""
        storage.documents.update(remembered("Legs", "Leg Curl", NOW - timedelta(days=40)))
        resolver = ExerciseSelectionResolver(
            storage,
            config=ResolverConfig(selection_max_age=timedelta(days=30)),
            clock=lambda: NOW,
        )

        selection = await resolver.resolve_default_selection(PERFORMED)

        assert resolver.state.reason == ResolutionReason.FALLBACK
        assert selection.exercise_name == "Bench Press"

    async def test_fresh_selection_used(self, storage):
        """Test fresh selection used."""
        storage.documents.update(remembered("Legs", "Leg Curl", NOW - timedelta(days=2)))
        resolver = ExerciseSelectionResolver(
            storage,
            config=ResolverConfig(selection_max_age=timedelta(days=30)),
            clock=lambda: NOW,
        )

        await resolver.resolve_default_selection(PERFORMED)

        assert resolver.state.reason == ResolutionReason.LAST_KNOWN

    async def test_no_max_age_keeps_old_selection(self, storage, resolver):
        """Test no max age keeps old selection."""
        storage.documents.update(remembered("Legs", "Leg Curl", NOW - timedelta(days=400)))

        await resolver.resolve_default_selection(PERFORMED)

        assert resolver.state.reason == ResolutionReason.LAST_KNOWN


class TestCancellation:
    """Tests for a view torn down mid-resolution."""

    async def test_cancelled_resolution_can_retry(self):
        """Test retrying after a cancelled resolution."""
        storage = BlockingStorage()
        resolver = ExerciseSelectionResolver(storage)

        task = asyncio.create_task(resolver.resolve_default_selection(PERFORMED))
        await storage.started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert resolver.state.phase == ResolutionPhase.UNINITIALIZED

        storage.release.set()
        selection = await resolver.resolve_default_selection(PERFORMED)
        assert selection.exercise_name == "Bench Press"


class TestFailedResolution:
    """Tests for a resolution that raises midway."""

    async def test_failing_fallback_mapping_can_retry(self, storage):
        """Test that a mapper raising during fallback leaves the resolver retryable."""
        calls = []

        def flaky_map_group(label):
            calls.append(label)
            if len(calls) == 1:
                raise KeyError(label)
            return map_to_main_group(label)

        resolver = ExerciseSelectionResolver(storage, map_group=flaky_map_group)

        with pytest.raises(KeyError):
            await resolver.resolve_default_selection([PerformedExercise("Bench Press", "Chest")])
        assert resolver.state.phase == ResolutionPhase.UNINITIALIZED

        selection = await resolver.resolve_default_selection(
            [PerformedExercise("Bench Press", "Chest")]
        )
        assert selection == SelectionState("Chest", "Bench Press")
        assert resolver.state.reason == ResolutionReason.FALLBACK

    async def test_failing_last_known_mapping_can_retry(self, storage):
        """Test that a mapper raising on the last selection leaves the resolver retryable."""
        storage.documents.update(remembered("Legs", "Leg Curl"))
        failures = [ValueError("taxonomy unavailable")]

        def flaky_map_group(label):
            if failures:
                raise failures.pop()
            return map_to_main_group(label)

        resolver = ExerciseSelectionResolver(storage, map_group=flaky_map_group)

        with pytest.raises(ValueError):
            await resolver.resolve_default_selection(PERFORMED)
        assert resolver.state.phase == ResolutionPhase.UNINITIALIZED

        selection = await resolver.resolve_default_selection(PERFORMED)
        assert selection == SelectionState("Legs", "Leg Curl")
        assert resolver.state.reason == ResolutionReason.LAST_KNOWN

    async def test_raising_storage_can_retry(self, storage):
        """Test that a raised storage error leaves the resolver retryable."""
        resolver = ExerciseSelectionResolver(storage)
        original = storage.load_last_selection

        async def broken_load():
            raise OSError("disk gone")

        storage.load_last_selection = broken_load
        with pytest.raises(OSError):
            await resolver.resolve_default_selection(PERFORMED)

        storage.load_last_selection = original
        selection = await resolver.resolve_default_selection(PERFORMED)
        assert selection.exercise_name == "Bench Press"


class TestExercisesForGroup:
    """Tests for listing exercises of a group."""

    def test_filters_by_main_group(self, resolver):
        """Test filters by main group."""
        names = [p.name for p in resolver.exercises_for_group(PERFORMED, "Legs")]
        assert names == ["Leg Curl"]

    def test_defaults_to_selected_group(self, resolver):
        """Test defaults to selected group."""
        resolver.select_muscle_group("Back")
        assert [p.name for p in resolver.exercises_for_group(PERFORMED)] == ["Pull Up"]

    def test_nothing_selected(self, resolver):
        """Test listing with no group selected."""
        assert resolver.exercises_for_group(PERFORMED) == []
