"""
tests.test_api

End-to-end HTTP tests over the ASGI app: health, auth, error envelopes and the
car ownership scenarios.
"""

from __future__ import annotations

import uuid
from datetime import timedelta

import httpx
import pytest

from garage_api.api.app import create_app
from garage_api.settings import Settings

from conftest import PASSWORD, bearer

CAR = {"make": "Mazda", "model": "3", "year": 2022, "license_plate": "API-1", "color": "red"}


@pytest.mark.asyncio
async def test_health_endpoints(client) -> None:
    r = await client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

    r = await client.get("/readyz")
    assert r.status_code == 200
    assert r.json() == {"status": "ready", "cache": "ok"}
    assert r.headers["x-request-id"]


@pytest.mark.asyncio
async def test_request_id_is_echoed(client) -> None:
    r = await client.get("/healthz", headers={"x-request-id": "abc-123"})
    assert r.headers["x-request-id"] == "abc-123"


@pytest.mark.asyncio
async def test_register_login_me(client) -> None:
    r = await client.post(
        "/v1/auth/register",
        json={"email": "dora@example.com", "password": "s3cret-pass", "first_name": "Dora"},
    )
    assert r.status_code == 201
    assert r.json()["role"] == "client"
    assert "password_hash" not in r.json()

    r = await client.post(
        "/v1/auth/login", json={"email": "dora@example.com", "password": "s3cret-pass"}
    )
    assert r.status_code == 200
    body = r.json()
    assert body["token_type"] == "bearer"
    assert body["expires_in"] == 24 * 3600

    r = await client.get(
        "/v1/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"}
    )
    assert r.status_code == 200
    assert r.json()["email"] == "dora@example.com"


@pytest.mark.asyncio
async def test_unauthenticated_responses_are_uniform(client, settings, api_people) -> None:
    expired = bearer(settings, api_people.client, ttl=timedelta(seconds=-60))
    forged = dict(bearer(settings, api_people.client))
    forged["Authorization"] += "x"
    other = Settings(env="test", jwt_secret="some-other-secret-0123456789abcdef0123")
    foreign_secret = bearer(other, api_people.client)

    bodies = []
    for headers in ({}, {"Authorization": "Bearer garbage"}, expired, forged, foreign_secret):
        r = await client.get("/v1/cars", headers=headers)
        assert r.status_code == 401
        assert r.headers["www-authenticate"] == "Bearer"
        bodies.append(r.json())

    assert bodies[0]["error"]["code"] == "unauthenticated"
    assert all(b == bodies[0] for b in bodies)


@pytest.mark.asyncio
async def test_token_of_deleted_user_is_rejected(client, settings, api_people) -> None:
    r = await client.delete(
        f"/v1/users/{api_people.other_client.id}", headers=bearer(settings, api_people.admin)
    )
    assert r.status_code == 204

    r = await client.get("/v1/cars", headers=bearer(settings, api_people.other_client))
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_car_scenarios(client, settings, api_people) -> None:
    admin = bearer(settings, api_people.admin)
    ann = bearer(settings, api_people.client)
    bob = bearer(settings, api_people.other_client)

    # Admin creates a car for a client; the stored owner is that client.
    r = await client.post(
        "/v1/cars", json={**CAR, "owner_id": str(api_people.client.id)}, headers=admin
    )
    assert r.status_code == 201
    anns_car = r.json()
    assert anns_car["owner_id"] == str(api_people.client.id)

    # A client's create is forced onto its own account.
    r = await client.post(
        "/v1/cars",
        json={**CAR, "license_plate": "API-2", "owner_id": str(api_people.client.id)},
        headers=bob,
    )
    assert r.status_code == 201
    assert r.json()["owner_id"] == str(api_people.other_client.id)

    # Listing is isolated, whatever owner filter the client asks for.
    r = await client.get(f"/v1/cars?owner_id={api_people.other_client.id}", headers=ann)
    assert [c["id"] for c in r.json()] == [anns_car["id"]]

    # Updating someone else's car is forbidden and leaves it untouched.
    r = await client.put(f"/v1/cars/{anns_car['id']}", json={**CAR, "color": "black"}, headers=bob)
    assert r.status_code == 403
    assert r.json()["error"]["code"] == "forbidden"
    r = await client.get(f"/v1/cars/{anns_car['id']}", headers=ann)
    assert r.json()["color"] == "red"

    # Plates are unique among live cars only.
    r = await client.post("/v1/cars", json=CAR, headers=bob)
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "already_exists"
    r = await client.delete(f"/v1/cars/{anns_car['id']}", headers=ann)
    assert r.status_code == 204
    r = await client.delete(f"/v1/cars/{anns_car['id']}", headers=ann)
    assert r.status_code == 404
    r = await client.post("/v1/cars", json=CAR, headers=bob)
    assert r.status_code == 201


@pytest.mark.asyncio
async def test_invalid_input_envelopes(client, settings, api_people) -> None:
    ann = bearer(settings, api_people.client)

    r = await client.get("/v1/cars/not-a-uuid", headers=ann)
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "invalid_input"

    r = await client.post("/v1/cars", json={**CAR, "year": 1850}, headers=ann)
    assert r.status_code == 422
    assert "year" in r.json()["error"]["message"]

    r = await client.get(f"/v1/cars/{uuid.uuid4()}", headers=ann)
    assert r.status_code == 404
    assert r.json() == {"error": {"code": "not_found", "message": "Car not found"}}


@pytest.mark.asyncio
async def test_role_gate_on_user_creation(client, settings, api_people) -> None:
    payload = {"email": "new@garage.test", "password": "long-enough", "role": "employee"}

    r = await client.post("/v1/users", json=payload, headers=bearer(settings, api_people.employee))
    assert r.status_code == 403

    r = await client.post("/v1/users", json=payload, headers=bearer(settings, api_people.manager))
    assert r.status_code == 201
    assert r.json()["role"] == "employee"


@pytest.mark.asyncio
async def test_repairs_through_cars_and_clients(client, settings, api_people) -> None:
    ann = bearer(settings, api_people.client)
    mechanic = bearer(settings, api_people.employee)

    car = (await client.post("/v1/cars", json=CAR, headers=ann)).json()
    profile = await client.post(
        "/v1/clients",
        json={"email": "ann@example.com", "first_name": "Ann", "last_name": "Lee"},
        headers=ann,
    )
    assert profile.status_code == 201
    r = await client.post(
        "/v1/repairs", json={"car_id": car["id"], "description": "Alignment"}, headers=mechanic
    )
    assert r.status_code == 201
    repair = r.json()
    assert repair["technician_id"] == str(api_people.employee.id)

    r = await client.get(f"/v1/cars/{car['id']}/repairs", headers=ann)
    assert [x["id"] for x in r.json()] == [repair["id"]]
    r = await client.get(f"/v1/clients/{profile.json()['id']}/repairs", headers=mechanic)
    assert [x["id"] for x in r.json()] == [repair["id"]]
    r = await client.get(f"/v1/clients/{profile.json()['id']}/cars", headers=ann)
    assert [x["id"] for x in r.json()] == [car["id"]]
    r = await client.get("/v1/repairs?status=pending", headers=ann)
    assert [x["id"] for x in r.json()] == [repair["id"]]


@pytest.mark.asyncio
async def test_employee_endpoints(client, settings, api_people) -> None:
    manager = bearer(settings, api_people.manager)
    payload = {
        "first_name": "Sam",
        "last_name": "Ortiz",
        "email": "sam@garage.test",
        "position": "painter",
        "hourly_rate": 31.5,
    }

    r = await client.post("/v1/employees", json=payload, headers=manager)
    assert r.status_code == 201
    employee = r.json()
    assert employee["hourly_rate"] == 31.5

    r = await client.get(
        f"/v1/employees/{employee['id']}", headers=bearer(settings, api_people.employee)
    )
    assert r.status_code == 200
    assert r.json()["employee_code"] == employee["employee_code"]

    r = await client.get("/v1/employees", headers=bearer(settings, api_people.client))
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_bootstrap_admin_can_log_in(tmp_path) -> None:
    settings = Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'boot.db'}",
        jwt_secret="bootstrap-secret-0123456789abcdef0123",
        bootstrap_admin_email="root@garage.test",
        bootstrap_admin_password=PASSWORD,
    )
    app = create_app(settings=settings)

    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.post(
                "/v1/auth/login", json={"email": "root@garage.test", "password": PASSWORD}
            )
            assert r.status_code == 200
            assert r.json()["user"]["role"] == "admin"
