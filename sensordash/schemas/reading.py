# sensordash/schemas/reading.py
from datetime import datetime, timezone

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel


def _utc(v: datetime) -> datetime:
    # SQLite returns capture times without an offset; they are stored as UTC
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


class ReadingRead(SQLModel):
    """
    One temperature reading with the place it was taken.
    """
    model_config = ConfigDict(extra="forbid")

    temperature_id: int
    thermometer_id: str
    place: str | None
    capture_time: datetime
    temperature: float

    @field_validator("capture_time")
    @classmethod
    def capture_time_utc(cls, v: datetime) -> datetime:
        return _utc(v)


class SensorReadingRead(SQLModel):
    """
    Latest reading of one sensor, with the device it hangs off.
    """
    model_config = ConfigDict(extra="forbid")

    temperature_id: int
    hostname: str | None
    address: str | None
    place: str | None
    thermometer_id: str
    pi_id: int | None
    capture_time: datetime
    temperature: float

    @field_validator("capture_time")
    @classmethod
    def capture_time_utc(cls, v: datetime) -> datetime:
        return _utc(v)


class GraphPoint(SQLModel):
    """
    Chart point: x = capture time, y = temperature.
    """
    model_config = ConfigDict(extra="forbid")

    x: datetime
    y: float
