"""
Tests for interview scheduling and results.

Tests cover:
- Scheduling only for company-approved applications
- One interview per application
- Results only after the interview took place
- Same result twice is accepted, a different one refused
- Company stats and the student's view
"""
from datetime import datetime, timedelta

import pytest
import pytest_asyncio

from placement_portal.models.application import ApplicationStatus
from placement_portal.models.interview import Interview, InterviewResult

from conftest import auth_headers, make_job, make_application


def _schedule_payload(application_id, when: datetime) -> dict:
    return {
        "application_id": str(application_id),
        "interview_date": when.date().isoformat(),
        "interview_time": when.time().replace(microsecond=0).isoformat(),
        "interview_type": "hr",
        "location": "Room 204",
    }


@pytest_asyncio.fixture
async def job(db, company, college):
    return await make_job(db, company, colleges=[college])


@pytest_asyncio.fixture
async def approved_application(db, student, student_profile, job):
    return await make_application(db, student, job, ApplicationStatus.COMPANY_APPROVED)


async def _add_interview(db, application, when: datetime, result=None) -> Interview:
    interview = Interview(
        application_id=application.id,
        interview_date=when,
        interview_type="technical",
        result=result,
    )
    db.add(interview)
    await db.commit()
    await db.refresh(interview)
    return interview


# ============================================================
# SCHEDULING
# ============================================================

@pytest.mark.asyncio
async def test_schedule_interview(async_client, company, approved_application, future):
    response = await async_client.post(
        "/api/interviews/",
        json=_schedule_payload(approved_application.id, future),
        headers=auth_headers(company),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["application_id"] == str(approved_application.id)
    assert data["interview_type"] == "hr"
    assert data["location"] == "Room 204"
    assert data["result"] is None
    assert data["student_name"] == "Priya Sharma"
    assert data["job_title"] == "Backend Engineer"
    # Date and time are combined into one timestamp
    assert datetime.fromisoformat(data["interview_date"]) == future.replace(microsecond=0)


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [
    ApplicationStatus.PENDING,
    ApplicationStatus.CELL_APPROVED,
    ApplicationStatus.CELL_REJECTED,
    ApplicationStatus.COMPANY_REJECTED,
])
async def test_schedule_requires_company_approval(async_client, db, student, student_profile, company, job, future, status):
    application = await make_application(db, student, job, status)

    response = await async_client.post(
        "/api/interviews/",
        json=_schedule_payload(application.id, future),
        headers=auth_headers(company),
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_schedule_twice_is_409(async_client, company, approved_application, future):
    first = await async_client.post(
        "/api/interviews/", json=_schedule_payload(approved_application.id, future), headers=auth_headers(company)
    )
    second = await async_client.post(
        "/api/interviews/", json=_schedule_payload(approved_application.id, future), headers=auth_headers(company)
    )

    assert first.status_code == 201
    assert second.status_code == 409


@pytest.mark.asyncio
async def test_schedule_with_utc_offset_is_stored_as_utc(async_client, company, approved_application):
    held_at = datetime.utcnow().replace(microsecond=0) - timedelta(hours=1)
    local = held_at + timedelta(hours=5, minutes=30)
    payload = _schedule_payload(approved_application.id, local)
    payload["interview_time"] = local.time().isoformat() + "+05:30"

    response = await async_client.post("/api/interviews/", json=payload, headers=auth_headers(company))

    assert response.status_code == 201
    assert datetime.fromisoformat(response.json()["interview_date"]) == held_at
    interview_id = response.json()["id"]

    # It already took place, so the result can be recorded
    response = await async_client.post(
        f"/api/interviews/{interview_id}/result",
        json={"result": "selected"},
        headers=auth_headers(company),
    )
    assert response.status_code == 200
    assert response.json()["result"] == "selected"


@pytest.mark.asyncio
async def test_other_company_cannot_schedule(async_client, other_company, approved_application, future):
    response = await async_client.post(
        "/api/interviews/",
        json=_schedule_payload(approved_application.id, future),
        headers=auth_headers(other_company),
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_pending_lists_approved_without_interview(async_client, db, company, approved_application, future):
    response = await async_client.get("/api/interviews/pending", headers=auth_headers(company))
    assert [a["id"] for a in response.json()] == [str(approved_application.id)]

    await _add_interview(db, approved_application, future)

    response = await async_client.get("/api/interviews/pending", headers=auth_headers(company))
    assert response.json() == []


# ============================================================
# RESULTS
# ============================================================

@pytest.mark.asyncio
async def test_result_refused_before_interview(async_client, db, company, approved_application, future):
    interview = await _add_interview(db, approved_application, future)

    response = await async_client.post(
        f"/api/interviews/{interview.id}/result",
        json={"result": "selected"},
        headers=auth_headers(company),
    )

    assert response.status_code == 409
    await db.refresh(interview)
    assert interview.result is None


@pytest.mark.asyncio
async def test_result_recorded_after_interview(async_client, db, company, approved_application, past):
    interview = await _add_interview(db, approved_application, past)

    response = await async_client.post(
        f"/api/interviews/{interview.id}/result",
        json={"result": "not_selected"},
        headers=auth_headers(company),
    )

    assert response.status_code == 200
    assert response.json()["result"] == "not_selected"
    assert response.json()["can_record_result"] is False


@pytest.mark.asyncio
async def test_same_result_twice_is_noop(async_client, db, company, approved_application, past):
    interview = await _add_interview(db, approved_application, past, result=InterviewResult.SELECTED.value)

    response = await async_client.post(
        f"/api/interviews/{interview.id}/result",
        json={"result": "selected"},
        headers=auth_headers(company),
    )

    assert response.status_code == 200
    assert response.json()["result"] == "selected"


@pytest.mark.asyncio
async def test_conflicting_result_is_409(async_client, db, company, approved_application, past):
    interview = await _add_interview(db, approved_application, past, result=InterviewResult.SELECTED.value)

    response = await async_client.post(
        f"/api/interviews/{interview.id}/result",
        json={"result": "not_selected"},
        headers=auth_headers(company),
    )

    assert response.status_code == 409
    await db.refresh(interview)
    assert interview.result == "selected"


@pytest.mark.asyncio
async def test_invalid_result_is_422(async_client, db, company, approved_application, past):
    interview = await _add_interview(db, approved_application, past)

    response = await async_client.post(
        f"/api/interviews/{interview.id}/result",
        json={"result": "maybe"},
        headers=auth_headers(company),
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_other_company_cannot_record_result(async_client, db, other_company, approved_application, past):
    interview = await _add_interview(db, approved_application, past)

    response = await async_client.post(
        f"/api/interviews/{interview.id}/result",
        json={"result": "selected"},
        headers=auth_headers(other_company),
    )

    assert response.status_code == 404


# ============================================================
# LISTINGS AND STATS
# ============================================================

@pytest.mark.asyncio
async def test_company_interview_listing(async_client, db, company, approved_application, past):
    await _add_interview(db, approved_application, past)

    response = await async_client.get("/api/interviews/company", headers=auth_headers(company))

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["can_record_result"] is True


@pytest.mark.asyncio
async def test_student_sees_own_interviews(async_client, db, student, company, approved_application, future):
    await _add_interview(db, approved_application, future)

    response = await async_client.get("/api/interviews/mine", headers=auth_headers(student))

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["company_name"] == "Acme Corp"
    assert data[0]["can_record_result"] is False


@pytest.mark.asyncio
async def test_interview_stats(async_client, db, student, student_profile, company, college, past, future):
    jobs = [await make_job(db, company, colleges=[college], title=f"Role {i}") for i in range(4)]
    await make_application(db, student, jobs[0], ApplicationStatus.COMPANY_APPROVED)
    upcoming = await make_application(db, student, jobs[1], ApplicationStatus.COMPANY_APPROVED)
    selected = await make_application(db, student, jobs[2], ApplicationStatus.COMPANY_APPROVED)
    rejected = await make_application(db, student, jobs[3], ApplicationStatus.COMPANY_APPROVED)
    await _add_interview(db, upcoming, future)
    await _add_interview(db, selected, past, result=InterviewResult.SELECTED.value)
    await _add_interview(db, rejected, past, result=InterviewResult.NOT_SELECTED.value)

    response = await async_client.get("/api/interviews/stats", headers=auth_headers(company))

    assert response.status_code == 200
    assert response.json() == {
        "approved_without_interview": 1,
        "scheduled": 3,
        "awaiting_result": 1,
        "selected": 1,
        "rejected": 1,
        "total_approved": 4,
    }
