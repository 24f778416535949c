# sensordash/routers/readings.py
import json
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, JSONResponse
from sqlmodel import Session

from sensordash.core.auth import require_admin, require_auth
from sensordash.core.views import render_page
from sensordash.database import get_session
from sensordash.models.user import User
from sensordash.repositories.reading_repo import ReadingRepository
from sensordash.schemas.reading import GraphPoint, ReadingRead, SensorReadingRead
from sensordash.services.reading_service import ReadingService

router = APIRouter(tags=["Readings"])

repo = ReadingRepository()
service = ReadingService(repo)


class PrettyJSONResponse(JSONResponse):
    """JSON indented by 4 spaces, easier to read in a browser."""

    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=False, indent=4).encode("utf-8")


@router.get("/graph", response_class=HTMLResponse)
def graph_page(
    count: int | None = None,
    current_user: User = Depends(require_auth),
):
    """Chart page; the data is fetched client-side from /data/{count}."""
    return render_page(
        "graph",
        count=ReadingService.clamp_count(count, 1000),
        message=None,
    )


@router.get(
    "/latest",
    response_model=list[ReadingRead],
    response_class=PrettyJSONResponse,
)
@router.get(
    "/latest/{count}",
    response_model=list[ReadingRead],
    response_class=PrettyJSONResponse,
)
def latest(
    count: int | None = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Most recent readings across all sensors, newest first.

    Default count is 1.
    """
    return service.latest(session, count)


@router.get(
    "/latest_from_each",
    response_model=list[SensorReadingRead],
    response_class=PrettyJSONResponse,
)
def latest_from_each(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    """One row per sensor: its latest reading (admin only)."""
    return service.latest_per_sensor(session)


@router.get("/data", response_model=dict[str, list[GraphPoint]])
@router.get("/data/{count}", response_model=dict[str, list[GraphPoint]])
def data(
    count: int | None = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Chart data for the current user's sensors:
    {place: [{x: capture_time, y: temperature}, ...]}.

    Default count is 10.
    """
    readings = service.for_user(session, current_user.user_id, count)
    return service.graph_series(readings)
