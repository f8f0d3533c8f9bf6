"""Progress query routes."""

from collections.abc import AsyncIterator
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel

from ...models.progress import ProgressQuery
from ...models.workout import MetricType, TimeRange
from ...services.session import ProgressSession
from ...services.targets import validate_target_value
from ...storage.sqlite import SqliteProgressStorage

router = APIRouter(prefix="/progress", tags=["progress"])


class TargetUpdate(BaseModel):
    """Request body for setting a target."""

    value: float
    metric: MetricType = MetricType.WEIGHT


class SelectionUpdate(BaseModel):
    """Request body for a manual selection."""

    muscle_group: str
    exercise: str


async def get_session(request: Request) -> AsyncIterator[ProgressSession]:
    """Provide a session for one request, closed when the response is done."""
    config = request.app.state.config
    session = ProgressSession(SqliteProgressStorage(config.storage.db_path), config=config)
    try:
        yield session
    finally:
        await session.close()


def _storage_error(error: str | None) -> HTTPException:
    return HTTPException(status_code=503, detail=error or "Storage unavailable")


@router.get("/exercises")
async def list_exercises(
    user_id: str | None = None,
    session: ProgressSession = Depends(get_session),
):
    """List logged exercises with their main muscle group."""
    result = await session.progress.get_performed_exercises(user_id)
    if not result.success:
        raise _storage_error(result.error)

    map_group = session.resolver.map_group
    return {
        "exercises": [
            {**p.to_dict(), "main_group": map_group(p.muscle_group_raw)}
            for p in result.data
        ]
    }


@router.get("/selection/default")
async def default_selection(
    user_id: str | None = None,
    session: ProgressSession = Depends(get_session),
):
    """Resolve the exercise the progress view opens with."""
    result = await session.progress.get_performed_exercises(user_id)
    if not result.success:
        raise _storage_error(result.error)

    selection = await session.resolver.resolve_default_selection(result.data)
    state = session.resolver.state
    return {
        "muscle_group": selection.muscle_group,
        "exercise": selection.exercise_name,
        "source": state.reason.value if state.reason else None,
    }


@router.put("/selection")
async def set_selection(
    update: SelectionUpdate,
    session: ProgressSession = Depends(get_session),
):
    """Record a manual selection."""
    session.resolver.select_muscle_group(update.muscle_group)
    selection = session.resolver.select_exercise(update.exercise)
    return {
        "muscle_group": selection.muscle_group,
        "exercise": selection.exercise_name,
    }


@router.get("/{exercise}")
async def exercise_progress(
    request: Request,
    exercise: str,
    time_range: TimeRange | None = Query(None, alias="range"),
    metric: MetricType | None = None,
    now: datetime | None = None,
    user_id: str | None = None,
    session: ProgressSession = Depends(get_session),
):
    """Per-day chart points and statistics of an exercise."""
    defaults = request.app.state.config.defaults
    query = ProgressQuery(
        exercise_name=exercise,
        now=now or datetime.now(),
        time_range=time_range or defaults.time_range,
        metric_type=metric or defaults.metric_type,
        user_id=user_id,
    )

    result = await session.progress.query_progress(query)
    if not result.success:
        raise _storage_error(result.error)

    target = await session.targets.get(exercise, query.metric_type)
    return {
        **result.data.to_dict(),
        "range": query.time_range.value,
        "metric": query.metric_type.value,
        "target": target,
    }


@router.get("/{exercise}/target")
async def get_target(
    exercise: str,
    metric: MetricType = MetricType.WEIGHT,
    session: ProgressSession = Depends(get_session),
):
    """Get the target of an exercise (0 when unset)."""
    value = await session.targets.get(exercise, metric)
    return {"exercise": exercise, "metric": metric.value, "value": value}


@router.put("/{exercise}/target")
async def set_target(
    exercise: str,
    update: TargetUpdate,
    session: ProgressSession = Depends(get_session),
):
    """Set the target of an exercise."""
    error = validate_target_value(update.value)
    if error:
        raise HTTPException(status_code=400, detail=error)

    result = await session.targets.set(exercise, update.metric, update.value)
    if not result.success:
        raise _storage_error(result.error)
    return {"exercise": exercise, "metric": update.metric.value, "value": update.value}
