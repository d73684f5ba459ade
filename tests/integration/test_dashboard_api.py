"""Integration tests for GET /api/users/dashboard/{id}."""

import pytest
from tests.factories import (
    EnrollmentFactory,
    InstructorContentFactory,
    ModuleFactory,
    UserFactory,
    persist,
)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_trainee_dashboard_shape(client, db_session, auth_headers):
    instructor = await persist(db_session, UserFactory.create(role="instructor"))
    trainee = await persist(
        db_session, UserFactory.create(role="trainee", trainee_id="NHIS/T/1001")
    )
    module = await persist(db_session, ModuleFactory.create(instructor.id, title="M1"))
    content = await persist(
        db_session, InstructorContentFactory.create(module.id, title="Scope Care")
    )
    await persist(db_session, EnrollmentFactory.create(content.id, trainee.id))

    response = await client.get(
        f"/api/users/dashboard/{trainee.id}", headers=auth_headers(trainee)
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["user"]["trainee_id"] == "NHIS/T/1001"
    assert data["stats"] == {
        "trainee_id": "NHIS/T/1001",
        "total_modules_enrolled": 1,
        "total_contents_enrolled": 1,
        "contents": [
            {"content_title": "Scope Care", "modules": [{"module_title": "M1"}]}
        ],
    }


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_can_view_any_dashboard(client, db_session, auth_headers):
    admin, instructor = await persist(
        db_session, UserFactory.create(role="admin"), UserFactory.create(role="instructor")
    )

    response = await client.get(
        f"/api/users/dashboard/{instructor.id}", headers=auth_headers(admin)
    )

    assert response.status_code == 200
    assert response.json()["stats"]["total_modules"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_user_cannot_view_someone_elses_dashboard(client, db_session, auth_headers):
    t1, t2 = await persist(
        db_session, UserFactory.create(role="trainee"), UserFactory.create(role="trainee")
    )

    response = await client.get(
        f"/api/users/dashboard/{t2.id}", headers=auth_headers(t1)
    )

    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unknown_role_dashboard_is_invalid_state(client, db_session, auth_headers):
    admin, odd = await persist(
        db_session, UserFactory.create(role="admin"), UserFactory.create(role="auditor")
    )

    response = await client.get(
        f"/api/users/dashboard/{odd.id}", headers=auth_headers(admin)
    )

    assert response.status_code == 400
    assert response.json()["kind"] == "invalid_state"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_missing_user_dashboard_is_404(client, db_session, auth_headers):
    admin = await persist(db_session, UserFactory.create(role="admin"))

    response = await client.get("/api/users/dashboard/999", headers=auth_headers(admin))

    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"
