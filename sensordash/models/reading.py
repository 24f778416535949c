# sensordash/models/reading.py
from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field


class Address(SQLModel, table=True):
    """
    A networked collector device (e.g. a Raspberry Pi) that thermometers
    are attached to.
    """

    __tablename__ = "addresses"

    address_id: int | None = Field(default=None, primary_key=True)
    pi_id: int | None = Field(default=None, index=True)
    hostname: str | None = Field(default=None, max_length=255)
    address: str | None = Field(default=None, max_length=255)


class Sensor(SQLModel, table=True):
    """
    A thermometer installed at a place.

    `thermometer_id` is the hardware id reported with every reading.
    """

    __tablename__ = "sensors"

    sensor_id: int | None = Field(default=None, primary_key=True)

    thermometer_id: str = Field(unique=True, index=True, max_length=100)

    address_id: int | None = Field(
        default=None,
        foreign_key="addresses.address_id",
    )

    place: str = Field(max_length=255)


class SensorUser(SQLModel, table=True):
    """
    Many-to-many assignment: which sensors a user may read.
    """

    __tablename__ = "sensors_users"

    sensor_id: int = Field(foreign_key="sensors.sensor_id", primary_key=True)
    user_id: int = Field(foreign_key="users.user_id", primary_key=True)


class Temperature(SQLModel, table=True):
    """
    One measurement. Written by the ingestion side; read-only here.
    """

    __tablename__ = "temperature"

    temperature_id: int | None = Field(default=None, primary_key=True)

    thermometer_id: str = Field(index=True, max_length=100)

    capture_time: datetime = Field(sa_type=DateTime(timezone=True), index=True)

    temperature: float
