"""
garage_api.db.models

Persistence schema for the repair shop.

Responsibilities:
- Define one canonical ORM model per entity:
  - User: login account carrying the role
  - Client / Employee: profile records linked to a user
  - Car, Repair, Appointment: shop resources owned (directly or via the car) by a client user
- Give every model an id, timestamps and a soft-delete tombstone (`deleted_at`).
"""

from __future__ import annotations

import enum
import uuid
from datetime import UTC, date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy import Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column

from garage_api.auth.models import Role
from garage_api.db.base import Base

_LIVE = text("deleted_at IS NULL")


def _utcnow() -> datetime:
    # Persist naive UTC timestamps; sqlite has no tz-aware datetime type.
    return datetime.now(UTC).replace(tzinfo=None)


def _live_unique(name: str, *columns: str) -> Index:
    # Uniqueness among live rows only: a tombstoned row never blocks re-creation.
    return Index(name, *columns, unique=True, sqlite_where=_LIVE, postgresql_where=_LIVE)


class RepairStatus(enum.StrEnum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class AppointmentStatus(enum.StrEnum):
    scheduled = "scheduled"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


class TimestampedMixin:
    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    deleted_at: Mapped[datetime | None] = mapped_column(nullable=True, index=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class User(TimestampedMixin, Base):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(320), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)
    first_name: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    role: Mapped[Role] = mapped_column(Enum(Role), nullable=False, default=Role.client)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (_live_unique("uq_users_email_live", "email"),)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Client(TimestampedMixin, Base):
    __tablename__ = "clients"

    # Walk-in clients created by staff may not have a login yet.
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=True, index=True
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    first_name: Mapped[str] = mapped_column(String(128), nullable=False)
    last_name: Mapped[str] = mapped_column(String(128), nullable=False)
    phone: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    address: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    city: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    state: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    zip_code: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        _live_unique("uq_clients_email_live", "email"),
        _live_unique("uq_clients_user_live", "user_id"),
    )


class Employee(TimestampedMixin, Base):
    __tablename__ = "employees"

    user_id: Mapped[uuid.UUID | None] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=True, index=True
    )
    employee_code: Mapped[str] = mapped_column(String(16), nullable=False)
    first_name: Mapped[str] = mapped_column(String(128), nullable=False)
    last_name: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    phone: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    department: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    position: Mapped[str] = mapped_column(String(128), nullable=False)
    hourly_rate: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=False, default=0
    )
    hours_per_week: Mapped[int] = mapped_column(Integer, nullable=False, default=40)
    salary: Mapped[float] = mapped_column(
        Numeric(12, 2, asdecimal=False), nullable=False, default=0
    )
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        _live_unique("uq_employees_email_live", "email"),
        _live_unique("uq_employees_code_live", "employee_code"),
    )


class Car(TimestampedMixin, Base):
    __tablename__ = "cars"

    owner_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
    make: Mapped[str] = mapped_column(String(64), nullable=False)
    model: Mapped[str] = mapped_column(String(64), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    license_plate: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    vin: Mapped[str | None] = mapped_column(String(32), nullable=True)
    color: Mapped[str] = mapped_column(String(32), nullable=False)
    mileage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        _live_unique("uq_cars_license_plate_live", "license_plate"),
        _live_unique("uq_cars_vin_live", "vin"),
    )


class Repair(TimestampedMixin, Base):
    __tablename__ = "repairs"

    car_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("cars.id"), nullable=False, index=True
    )
    technician_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[RepairStatus] = mapped_column(
        Enum(RepairStatus), nullable=False, default=RepairStatus.pending
    )
    cost: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=False, default=0
    )
    started_at: Mapped[datetime | None] = mapped_column(nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)


class Appointment(TimestampedMixin, Base):
    __tablename__ = "appointments"

    customer_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
    car_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("cars.id"), nullable=False, index=True
    )
    service_type: Mapped[str] = mapped_column(String(128), nullable=False)
    status: Mapped[AppointmentStatus] = mapped_column(
        Enum(AppointmentStatus), nullable=False, default=AppointmentStatus.scheduled
    )
    scheduled_at: Mapped[datetime] = mapped_column(nullable=False, index=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")


# --- Module Notes -----------------------------------------------------------
# Owner references: Car.owner_id, Appointment.customer_id, Client.user_id and
# Employee.user_id point at users.id; a Repair is owned through its car.
