"""
garage_api.schemas

Request/response models (pydantic v2).

Responsibilities:
- Define the structural shape of every payload accepted and returned by the API.
- Leave business rules (ranges, references, uniqueness) to the service layer.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from garage_api.auth.models import Role
from garage_api.db.models import AppointmentStatus, RepairStatus


class _In(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class _Out(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime


# -- auth / users -------------------------------------------------------------


class RegisterRequest(_In):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1, max_length=256)
    first_name: str = Field(default="", max_length=128)
    last_name: str = Field(default="", max_length=128)


class LoginRequest(_In):
    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=256)


class UserOut(_Out):
    email: str
    first_name: str
    last_name: str
    role: Role
    is_active: bool


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserOut


class UserCreate(_In):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1, max_length=256)
    first_name: str = Field(default="", max_length=128)
    last_name: str = Field(default="", max_length=128)
    role: Role = Role.client


class UserUpdate(_In):
    first_name: str = Field(default="", max_length=128)
    last_name: str = Field(default="", max_length=128)
    role: Role
    is_active: bool = True


# -- cars -----------------------------------------------------------------------


class CarIn(_In):
    make: str = Field(default="", max_length=64)
    model: str = Field(default="", max_length=64)
    year: int = 0
    license_plate: str = Field(default="", max_length=32)
    vin: str | None = Field(default=None, max_length=32)
    color: str = Field(default="", max_length=32)
    mileage: int = 0
    # Ignored for clients: their cars are always their own.
    owner_id: uuid.UUID | None = None


class CarOut(_Out):
    owner_id: uuid.UUID
    make: str
    model: str
    year: int
    license_plate: str
    vin: str | None
    color: str
    mileage: int


# -- repairs --------------------------------------------------------------------


class RepairIn(_In):
    car_id: uuid.UUID
    technician_id: uuid.UUID | None = None
    description: str = ""
    status: RepairStatus = RepairStatus.pending
    cost: float = 0
    started_at: datetime | None = None
    completed_at: datetime | None = None


class RepairOut(_Out):
    car_id: uuid.UUID
    technician_id: uuid.UUID
    description: str
    status: RepairStatus
    cost: float
    started_at: datetime | None
    completed_at: datetime | None


# -- appointments ---------------------------------------------------------------


class AppointmentIn(_In):
    customer_id: uuid.UUID | None = None
    car_id: uuid.UUID
    service_type: str = Field(default="", max_length=128)
    status: AppointmentStatus = AppointmentStatus.scheduled
    scheduled_at: datetime
    notes: str = ""


class AppointmentOut(_Out):
    customer_id: uuid.UUID
    car_id: uuid.UUID
    service_type: str
    status: AppointmentStatus
    scheduled_at: datetime
    notes: str


# -- clients ----------------------------------------------------------------------


class ClientIn(_In):
    user_id: uuid.UUID | None = None
    email: str = Field(default="", max_length=320)
    first_name: str = Field(default="", max_length=128)
    last_name: str = Field(default="", max_length=128)
    phone: str = Field(default="", max_length=64)
    address: str = Field(default="", max_length=256)
    city: str = Field(default="", max_length=128)
    state: str = Field(default="", max_length=128)
    zip_code: str = Field(default="", max_length=32)
    is_active: bool = True


class ClientOut(_Out):
    user_id: uuid.UUID | None
    email: str
    first_name: str
    last_name: str
    phone: str
    address: str
    city: str
    state: str
    zip_code: str
    is_active: bool


# -- employees --------------------------------------------------------------------


class EmployeeIn(_In):
    user_id: uuid.UUID | None = None
    first_name: str = Field(default="", max_length=128)
    last_name: str = Field(default="", max_length=128)
    email: str = Field(default="", max_length=320)
    phone: str = Field(default="", max_length=64)
    department: str = Field(default="", max_length=128)
    position: str = Field(default="", max_length=128)
    hourly_rate: float = 0
    hours_per_week: int = 40
    salary: float = 0
    hire_date: date | None = None
    is_active: bool = True


class EmployeeOut(_Out):
    user_id: uuid.UUID | None
    employee_code: str
    first_name: str
    last_name: str
    email: str
    phone: str
    department: str
    position: str
    hourly_rate: float
    hours_per_week: int
    salary: float
    hire_date: date | None
    is_active: bool


# --- Module Notes -----------------------------------------------------------
# `EmployeeOut` doubles as the cache payload for employee reads.
