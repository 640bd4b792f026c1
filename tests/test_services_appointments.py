"""
tests.test_services_appointments
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from garage_api.db.models import AppointmentStatus
from garage_api.errors import Forbidden, InvalidInput
from garage_api.schemas import AppointmentIn, CarIn
from garage_api.services.appointments import AppointmentService
from garage_api.services.cars import CarService

WHEN = datetime(2030, 1, 15, 10, 30)


@pytest.fixture
def appointments(session, settings) -> AppointmentService:
    return AppointmentService(session=session, settings=settings)


async def _car_of(session, settings, principal, plate: str):
    return await CarService(session=session, settings=settings).create(
        principal,
        CarIn(make="VW", model="Golf", year=2020, license_plate=plate, color="white"),
    )


@pytest.mark.asyncio
async def test_client_books_for_own_car(appointments, session, settings, people) -> None:
    car = await _car_of(session, settings, people.client, "AP-1")

    appt = await appointments.create(
        people.client,
        AppointmentIn(
            customer_id=people.other_client.id,
            car_id=car.id,
            service_type="inspection",
            scheduled_at=WHEN,
        ),
    )

    assert appt.customer_id == people.client.id
    assert appt.status is AppointmentStatus.scheduled


@pytest.mark.asyncio
async def test_car_must_belong_to_customer(appointments, session, settings, people) -> None:
    foreign = await _car_of(session, settings, people.other_client, "AP-2")

    with pytest.raises(InvalidInput):
        await appointments.create(
            people.client,
            AppointmentIn(car_id=foreign.id, service_type="oil", scheduled_at=WHEN),
        )


@pytest.mark.asyncio
async def test_staff_must_name_a_client_customer(appointments, session, settings, people) -> None:
    car = await _car_of(session, settings, people.client, "AP-1")

    with pytest.raises(InvalidInput):
        await appointments.create(
            people.manager,
            AppointmentIn(car_id=car.id, service_type="oil", scheduled_at=WHEN),
        )
    appt = await appointments.create(
        people.manager,
        AppointmentIn(
            customer_id=people.client.id, car_id=car.id, service_type="oil", scheduled_at=WHEN
        ),
    )
    assert appt.customer_id == people.client.id


@pytest.mark.asyncio
async def test_employee_confirms_but_cannot_cancel_by_delete(
    appointments, session, settings, people
) -> None:
    car = await _car_of(session, settings, people.client, "AP-1")
    appt = await appointments.create(
        people.client, AppointmentIn(car_id=car.id, service_type="tyres", scheduled_at=WHEN)
    )

    confirmed = await appointments.update(
        people.employee,
        appt.id,
        AppointmentIn(
            car_id=car.id,
            service_type="tyres",
            scheduled_at=WHEN,
            status=AppointmentStatus.confirmed,
        ),
    )

    assert confirmed.status is AppointmentStatus.confirmed
    assert confirmed.customer_id == people.client.id
    with pytest.raises(Forbidden):
        await appointments.delete(people.employee, appt.id)


@pytest.mark.asyncio
async def test_scheduled_at_is_stored_as_naive_utc(appointments, session, settings, people) -> None:
    car = await _car_of(session, settings, people.client, "AP-1")
    local = datetime(2030, 1, 15, 12, 30, tzinfo=timezone(timedelta(hours=2)))

    appt = await appointments.create(
        people.client, AppointmentIn(car_id=car.id, service_type="wash", scheduled_at=local)
    )

    assert appt.scheduled_at == local.astimezone(UTC).replace(tzinfo=None)


@pytest.mark.asyncio
async def test_listing_filters(appointments, session, settings, people) -> None:
    car = await _car_of(session, settings, people.client, "AP-1")
    theirs = await _car_of(session, settings, people.other_client, "AP-2")
    mine = await appointments.create(
        people.client, AppointmentIn(car_id=car.id, service_type="a", scheduled_at=WHEN)
    )
    await appointments.create(
        people.other_client, AppointmentIn(car_id=theirs.id, service_type="b", scheduled_at=WHEN)
    )

    assert [a.id for a in await appointments.list(people.client)] == [mine.id]
    assert len(await appointments.list(people.employee)) == 2
    assert [a.id for a in await appointments.list(people.admin, car_id=car.id)] == [mine.id]
    assert await appointments.list(people.admin, status=AppointmentStatus.completed) == []
