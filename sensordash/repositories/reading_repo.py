# sensordash/repositories/reading_repo.py
from sqlalchemy import func
from sqlmodel import Session, select

from sensordash.models.reading import Address, Sensor, SensorUser, Temperature
from sensordash.schemas.reading import ReadingRead, SensorReadingRead


class ReadingRepository:
    """
    Read-only queries over temperature readings.

    `count` arguments are expected to be already validated ints
    (see ReadingService.clamp_count); they are bound as LIMIT parameters.
    """

    def _reading_columns(self):
        return (
            Temperature.temperature_id,
            Temperature.thermometer_id,
            Sensor.place,
            Temperature.capture_time,
            Temperature.temperature,
        )

    def latest(self, session: Session, count: int = 1) -> list[ReadingRead]:
        """
        Latest N readings across all sensors, newest first.
        """
        stmt = (
            select(*self._reading_columns())
            .join(Sensor, Sensor.thermometer_id == Temperature.thermometer_id, isouter=True)
            .order_by(Temperature.capture_time.desc(), Temperature.temperature_id.desc())
            .limit(count)
        )
        return [ReadingRead(**row._mapping) for row in session.exec(stmt).all()]

    def latest_per_sensor(self, session: Session) -> list[SensorReadingRead]:
        """
        Most recent reading of every thermometer, grouped by device then place.

        "Most recent" = highest temperature_id per thermometer, i.e. the
        last row ingested.
        """
        newest_ids = (
            select(func.max(Temperature.temperature_id))
            .group_by(Temperature.thermometer_id)
        )

        stmt = (
            select(
                Temperature.temperature_id,
                Address.hostname,
                Address.address,
                Sensor.place,
                Temperature.thermometer_id,
                Address.pi_id,
                Temperature.capture_time,
                Temperature.temperature,
            )
            .join(Sensor, Sensor.thermometer_id == Temperature.thermometer_id, isouter=True)
            .join(Address, Address.address_id == Sensor.address_id, isouter=True)
            .where(Temperature.temperature_id.in_(newest_ids))
            .order_by(Address.pi_id, Sensor.place)
        )
        return [SensorReadingRead(**row._mapping) for row in session.exec(stmt).all()]

    def for_user(
        self,
        session: Session,
        user_id: int,
        count: int = 10,
    ) -> list[ReadingRead]:
        """
        Latest N readings from the sensors assigned to `user_id`.

        Users without assigned sensors get an empty list.
        """
        assigned = (
            select(Sensor.thermometer_id)
            .join(SensorUser, SensorUser.sensor_id == Sensor.sensor_id)
            .where(SensorUser.user_id == user_id)
        )

        stmt = (
            select(*self._reading_columns())
            .join(Sensor, Sensor.thermometer_id == Temperature.thermometer_id, isouter=True)
            .where(Temperature.thermometer_id.in_(assigned))
            .order_by(Temperature.capture_time.desc(), Temperature.temperature_id.desc())
            .limit(count)
        )
        return [ReadingRead(**row._mapping) for row in session.exec(stmt).all()]
