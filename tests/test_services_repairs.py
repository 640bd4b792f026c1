"""
tests.test_services_repairs

Repair service: indirect ownership through the car, technician attribution, completion.
"""

from __future__ import annotations

from datetime import datetime

import pytest

from garage_api.db.models import RepairStatus
from garage_api.errors import AlreadyExists, Forbidden, InvalidInput, NotFound
from garage_api.schemas import CarIn, RepairIn
from garage_api.services.cars import CarService
from garage_api.services.repairs import RepairService


@pytest.fixture
def repairs(session, settings) -> RepairService:
    return RepairService(session=session, settings=settings)


async def _car_of(session, settings, principal, plate: str):
    return await CarService(session=session, settings=settings).create(
        principal,
        CarIn(make="Ford", model="Focus", year=2015, license_plate=plate, color="grey"),
    )


@pytest.mark.asyncio
async def test_employee_creates_repair_as_technician(repairs, session, settings, people) -> None:
    car = await _car_of(session, settings, people.client, "R-1")

    repair = await repairs.create(
        people.employee,
        RepairIn(car_id=car.id, description="Brake pads", technician_id=people.manager.id),
    )

    assert repair.technician_id == people.employee.id
    assert repair.status is RepairStatus.pending


@pytest.mark.asyncio
async def test_manager_may_name_technician(repairs, session, settings, people) -> None:
    car = await _car_of(session, settings, people.client, "R-1")

    named = await repairs.create(
        people.manager,
        RepairIn(car_id=car.id, description="Oil", technician_id=people.employee.id),
    )
    defaulted = await repairs.create(people.manager, RepairIn(car_id=car.id, description="Tyres"))

    assert named.technician_id == people.employee.id
    assert defaulted.technician_id == people.manager.id


@pytest.mark.asyncio
async def test_technician_must_be_staff(repairs, session, settings, people) -> None:
    car = await _car_of(session, settings, people.client, "R-1")

    with pytest.raises(InvalidInput):
        await repairs.create(
            people.admin,
            RepairIn(car_id=car.id, description="Oil", technician_id=people.client.id),
        )


@pytest.mark.asyncio
async def test_clients_cannot_create_repairs(repairs, session, settings, people) -> None:
    car = await _car_of(session, settings, people.client, "R-1")

    with pytest.raises(Forbidden):
        await repairs.create(people.client, RepairIn(car_id=car.id, description="DIY"))


@pytest.mark.asyncio
async def test_client_sees_only_repairs_of_own_cars(repairs, session, settings, people) -> None:
    mine = await _car_of(session, settings, people.client, "MINE-1")
    theirs = await _car_of(session, settings, people.other_client, "THEIRS-1")
    own_repair = await repairs.create(people.employee, RepairIn(car_id=mine.id, description="A"))
    foreign = await repairs.create(people.employee, RepairIn(car_id=theirs.id, description="B"))

    listed = await repairs.list(people.client, owner_id=people.other_client.id)

    assert [r.id for r in listed] == [own_repair.id]
    assert (await repairs.get(people.client, own_repair.id)).id == own_repair.id
    with pytest.raises(Forbidden):
        await repairs.get(people.client, foreign.id)


@pytest.mark.asyncio
async def test_completion_sets_completed_at(repairs, session, settings, people) -> None:
    car = await _car_of(session, settings, people.client, "R-1")
    repair = await repairs.create(people.employee, RepairIn(car_id=car.id, description="Clutch"))
    assert repair.completed_at is None

    done = await repairs.update(
        people.employee,
        repair.id,
        RepairIn(car_id=car.id, description="Clutch", status=RepairStatus.completed, cost=300),
    )

    assert done.status is RepairStatus.completed
    assert done.completed_at is not None
    assert done.cost == 300


@pytest.mark.asyncio
async def test_completed_at_is_stamped_only_once(repairs, session, settings, people) -> None:
    car = await _car_of(session, settings, people.client, "R-1")
    payload = RepairIn(car_id=car.id, description="Clutch", status=RepairStatus.completed)
    repair = await repairs.create(people.employee, payload)
    stamped = repair.completed_at

    again = await repairs.update(
        people.employee, repair.id, payload.model_copy(update={"cost": 120})
    )
    assert again.cost == 120
    assert again.completed_at == stamped

    reopened = await repairs.update(
        people.employee,
        repair.id,
        payload.model_copy(update={"status": RepairStatus.in_progress}),
    )
    assert reopened.completed_at is None


@pytest.mark.asyncio
async def test_car_and_technician_are_immutable(repairs, session, settings, people) -> None:
    car = await _car_of(session, settings, people.client, "R-1")
    other = await _car_of(session, settings, people.other_client, "R-2")
    repair = await repairs.create(people.employee, RepairIn(car_id=car.id, description="Belt"))

    updated = await repairs.update(
        people.admin,
        repair.id,
        RepairIn(car_id=other.id, description="Belt", technician_id=people.manager.id),
    )

    assert updated.car_id == car.id
    assert updated.technician_id == people.employee.id


@pytest.mark.asyncio
async def test_duplicate_repair_is_rejected(repairs, session, settings, people) -> None:
    car = await _car_of(session, settings, people.client, "R-1")
    started = datetime(2024, 5, 1, 9, 0)
    await repairs.create(
        people.employee, RepairIn(car_id=car.id, description="Battery", started_at=started)
    )

    with pytest.raises(AlreadyExists):
        await repairs.create(
            people.employee, RepairIn(car_id=car.id, description="Battery", started_at=started)
        )


@pytest.mark.asyncio
async def test_invalid_repairs(repairs, session, settings, people) -> None:
    car = await _car_of(session, settings, people.client, "R-1")

    with pytest.raises(InvalidInput):
        await repairs.create(people.employee, RepairIn(car_id=car.id, description="", cost=-1))
    with pytest.raises(InvalidInput):
        await repairs.create(
            people.employee,
            RepairIn(
                car_id=car.id,
                description="Backwards",
                started_at=datetime(2024, 5, 2),
                completed_at=datetime(2024, 5, 1),
            ),
        )


@pytest.mark.asyncio
async def test_list_for_car(repairs, session, settings, people) -> None:
    car = await _car_of(session, settings, people.client, "R-1")
    other = await _car_of(session, settings, people.client, "R-2")
    repair = await repairs.create(people.employee, RepairIn(car_id=car.id, description="X"))
    await repairs.create(people.employee, RepairIn(car_id=other.id, description="Y"))

    assert [r.id for r in await repairs.list_for_car(people.client, car.id)] == [repair.id]
    with pytest.raises(Forbidden):
        await repairs.list_for_car(people.other_client, car.id)


@pytest.mark.asyncio
async def test_list_for_deleted_car_is_not_found(repairs, session, settings, people) -> None:
    car = await _car_of(session, settings, people.client, "R-1")
    await CarService(session=session, settings=settings).delete(people.client, car.id)

    with pytest.raises(NotFound):
        await repairs.list_for_car(people.admin, car.id)


@pytest.mark.asyncio
async def test_repairs_survive_car_removal(repairs, session, settings, people) -> None:
    car = await _car_of(session, settings, people.client, "R-1")
    repair = await repairs.create(people.employee, RepairIn(car_id=car.id, description="Z"))
    await CarService(session=session, settings=settings).delete(people.client, car.id)

    assert (await repairs.get(people.client, repair.id)).id == repair.id
