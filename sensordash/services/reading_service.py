# sensordash/services/reading_service.py
from collections import defaultdict

from sqlmodel import Session

from sensordash.core.config import get_settings
from sensordash.repositories.reading_repo import ReadingRepository
from sensordash.schemas.reading import GraphPoint, ReadingRead, SensorReadingRead

settings = get_settings()

DEFAULT_LATEST_COUNT = 1
DEFAULT_USER_COUNT = 10


class ReadingService:
    """
    Business logic for sensor readings.

    Responsibilities:
      - bound `count` before it reaches the database
      - scope user-facing data to assigned sensors
      - shape rows for the chart
    """

    def __init__(self, repo: ReadingRepository):
        self.repo = repo

    @staticmethod
    def clamp_count(count: int | str | None, default: int) -> int:
        """
        Coerce `count` to an int in [1, MAX_READINGS_COUNT].

        None or a non-numeric value falls back to `default`.
        """
        if count is None:
            return default
        try:
            value = int(count)
        except (TypeError, ValueError):
            return default
        return max(1, min(value, settings.MAX_READINGS_COUNT))

    def latest(self, session: Session, count: int | None = None) -> list[ReadingRead]:
        return self.repo.latest(
            session, self.clamp_count(count, DEFAULT_LATEST_COUNT)
        )

    def latest_per_sensor(self, session: Session) -> list[SensorReadingRead]:
        return self.repo.latest_per_sensor(session)

    def for_user(
        self,
        session: Session,
        user_id: int,
        count: int | None = None,
    ) -> list[ReadingRead]:
        return self.repo.for_user(
            session, user_id, self.clamp_count(count, DEFAULT_USER_COUNT)
        )

    @staticmethod
    def graph_series(readings: list[ReadingRead]) -> dict[str, list[GraphPoint]]:
        """
        Group readings by place: {place: [{x: capture_time, y: temperature}]}.

        Order within each series follows the input (newest first).
        """
        series: dict[str, list[GraphPoint]] = defaultdict(list)
        for reading in readings:
            place = reading.place or reading.thermometer_id
            series[place].append(GraphPoint(x=reading.capture_time, y=reading.temperature))
        return dict(series)
