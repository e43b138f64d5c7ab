"""
Tests for the Applications API.

Tests cover:
- Applying (resume required, visibility, deadline, one application per job)
- Placement cell and company decisions
- Role-scoped listings
- The full review flow from application to interview
"""
import uuid
from datetime import date, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.models.application import ApplicationStatus
from placement_portal.models.job import JobStatus

from conftest import auth_headers, make_job, make_application


# ============================================================
# END-TO-END FLOW
# ============================================================

@pytest.mark.asyncio
async def test_review_flow_from_application_to_interview(
    async_client: AsyncClient,
    db: AsyncSession,
    student,
    student_profile,
    company,
    admin,
    college,
):
    """Student (CGPA 8.0) applies to a 7.0 job; cell approves; company approves; interview scheduled."""
    job = await make_job(db, company, colleges=[college], min_cgpa=7.0)

    # Job board shows the job as Eligible
    response = await async_client.get("/api/jobs/available", headers=auth_headers(student))
    assert response.status_code == 200
    board = response.json()
    assert [j["id"] for j in board] == [str(job.id)]
    assert board[0]["eligibility"] == "Eligible"

    # Apply
    response = await async_client.post(
        "/api/applications/", json={"job_id": str(job.id)}, headers=auth_headers(student)
    )
    assert response.status_code == 201
    application = response.json()
    assert application["status"] == "pending"
    assert application["job_title"] == job.title
    application_id = application["id"]

    # Company does not see it yet
    response = await async_client.get("/api/applications/company", headers=auth_headers(company))
    assert response.json() == []

    # Placement cell approves
    response = await async_client.post(
        f"/api/applications/{application_id}/cell-decision",
        json={"decision": "approve", "notes": "Good fit", "expected_status": "pending"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    assert response.json()["status"] == "cell_approved"
    assert response.json()["placement_cell_notes"] == "Good fit"

    # Company sees it awaiting review
    response = await async_client.get(
        "/api/applications/company", params={"status": "cell_approved"}, headers=auth_headers(company)
    )
    awaiting = response.json()
    assert [a["id"] for a in awaiting] == [application_id]
    assert awaiting[0]["student_name"] == "Priya Sharma"
    assert awaiting[0]["cgpa"] == 8.0

    # Company approves
    response = await async_client.post(
        f"/api/applications/{application_id}/company-decision",
        json={"decision": "approve"},
        headers=auth_headers(company),
    )
    assert response.status_code == 200
    assert response.json()["status"] == "company_approved"

    response = await async_client.get(
        "/api/applications/company", params={"status": "company_approved"}, headers=auth_headers(company)
    )
    assert [a["id"] for a in response.json()] == [application_id]

    # Interview can now be scheduled
    response = await async_client.post(
        "/api/interviews/",
        json={
            "application_id": application_id,
            "interview_date": (date.today() + timedelta(days=3)).isoformat(),
            "interview_time": "10:30:00",
            "interview_type": "technical",
            "meeting_link": "https://meet.example.com/abc",
        },
        headers=auth_headers(company),
    )
    assert response.status_code == 201
    assert response.json()["can_record_result"] is False

    # Student sees the final status
    response = await async_client.get("/api/applications/mine", headers=auth_headers(student))
    assert [a["status"] for a in response.json()] == ["company_approved"]


# ============================================================
# APPLY
# ============================================================

@pytest.mark.asyncio
async def test_apply_requires_resume(async_client, db, student, student_profile, company, college):
    student_profile.resume_url = None
    await db.commit()
    job = await make_job(db, company, colleges=[college])

    response = await async_client.post(
        "/api/applications/", json={"job_id": str(job.id)}, headers=auth_headers(student)
    )

    assert response.status_code == 400
    assert "resume" in response.json()["detail"].lower()


@pytest.mark.asyncio
async def test_apply_requires_profile(async_client, db, student, company, college):
    job = await make_job(db, company, colleges=[college])

    response = await async_client.post(
        "/api/applications/", json={"job_id": str(job.id)}, headers=auth_headers(student)
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_apply_to_unapproved_job_is_404(async_client, db, student, student_profile, company, college):
    job = await make_job(db, company, colleges=[college], approved=False)

    response = await async_client.post(
        "/api/applications/", json={"job_id": str(job.id)}, headers=auth_headers(student)
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_apply_to_other_college_job_is_404(async_client, db, student, student_profile, company, other_college):
    job = await make_job(db, company, colleges=[other_college])

    response = await async_client.post(
        "/api/applications/", json={"job_id": str(job.id)}, headers=auth_headers(student)
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_apply_to_closed_job_is_404(async_client, db, student, student_profile, company, college):
    job = await make_job(db, company, colleges=[college], status=JobStatus.CLOSED.value)

    response = await async_client.post(
        "/api/applications/", json={"job_id": str(job.id)}, headers=auth_headers(student)
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_apply_to_unknown_job_is_404(async_client, student, student_profile):
    response = await async_client.post(
        "/api/applications/", json={"job_id": str(uuid.uuid4())}, headers=auth_headers(student)
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_apply_after_deadline_is_409(async_client, db, student, student_profile, company, college, past):
    job = await make_job(db, company, colleges=[college], application_deadline=past)

    response = await async_client.post(
        "/api/applications/", json={"job_id": str(job.id)}, headers=auth_headers(student)
    )

    assert response.status_code == 409
    assert "deadline" in response.json()["detail"].lower()


@pytest.mark.asyncio
async def test_apply_twice_is_409(async_client, db, student, student_profile, company, college):
    job = await make_job(db, company, colleges=[college])

    first = await async_client.post(
        "/api/applications/", json={"job_id": str(job.id)}, headers=auth_headers(student)
    )
    second = await async_client.post(
        "/api/applications/", json={"job_id": str(job.id)}, headers=auth_headers(student)
    )

    assert first.status_code == 201
    assert second.status_code == 409

    response = await async_client.get("/api/applications/mine", headers=auth_headers(student))
    assert len(response.json()) == 1


@pytest.mark.asyncio
async def test_below_minimum_cgpa_can_still_apply(async_client, db, student, student_profile, company, college):
    """Eligibility is shown to the student but does not block applying"""
    job = await make_job(db, company, colleges=[college], min_cgpa=9.0)

    response = await async_client.post(
        "/api/applications/", json={"job_id": str(job.id)}, headers=auth_headers(student)
    )

    assert response.status_code == 201


@pytest.mark.asyncio
async def test_only_students_apply(async_client, db, company, college):
    job = await make_job(db, company, colleges=[college])

    response = await async_client.post(
        "/api/applications/", json={"job_id": str(job.id)}, headers=auth_headers(company)
    )

    assert response.status_code == 403


# ============================================================
# DECISIONS
# ============================================================

@pytest.mark.asyncio
async def test_cell_reject_hides_from_company(async_client, db, student, student_profile, company, admin, college):
    job = await make_job(db, company, colleges=[college])
    application = await make_application(db, student, job)

    response = await async_client.post(
        f"/api/applications/{application.id}/cell-decision",
        json={"decision": "reject", "notes": "Incomplete documents"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["status"] == "cell_rejected"

    response = await async_client.get("/api/applications/company", headers=auth_headers(company))
    assert response.json() == []


@pytest.mark.asyncio
async def test_cell_decision_twice_is_409(async_client, db, student, student_profile, company, admin, college):
    job = await make_job(db, company, colleges=[college])
    application = await make_application(db, student, job, ApplicationStatus.CELL_APPROVED)

    response = await async_client.post(
        f"/api/applications/{application.id}/cell-decision",
        json={"decision": "reject"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_stale_cell_decision_is_409(async_client, db, student, student_profile, company, admin, college):
    job = await make_job(db, company, colleges=[college])
    application = await make_application(db, student, job, ApplicationStatus.CELL_REJECTED)

    response = await async_client.post(
        f"/api/applications/{application.id}/cell-decision",
        json={"decision": "approve", "expected_status": "pending"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 409
    assert "expected" in response.json()["detail"]


@pytest.mark.asyncio
async def test_other_college_admin_cannot_decide(async_client, db, student, student_profile, company, other_admin, college):
    job = await make_job(db, company, colleges=[college])
    application = await make_application(db, student, job)

    response = await async_client.post(
        f"/api/applications/{application.id}/cell-decision",
        json={"decision": "approve"},
        headers=auth_headers(other_admin),
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_company_cannot_decide_before_cell(async_client, db, student, student_profile, company, college):
    job = await make_job(db, company, colleges=[college])
    application = await make_application(db, student, job)

    response = await async_client.post(
        f"/api/applications/{application.id}/company-decision",
        json={"decision": "approve"},
        headers=auth_headers(company),
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_company_cannot_decide_other_company_application(
    async_client, db, student, student_profile, company, other_company, college
):
    job = await make_job(db, company, colleges=[college])
    application = await make_application(db, student, job, ApplicationStatus.CELL_APPROVED)

    response = await async_client.post(
        f"/api/applications/{application.id}/company-decision",
        json={"decision": "approve"},
        headers=auth_headers(other_company),
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_company_cannot_use_cell_endpoint(async_client, db, student, student_profile, company, college):
    job = await make_job(db, company, colleges=[college])
    application = await make_application(db, student, job)

    response = await async_client.post(
        f"/api/applications/{application.id}/cell-decision",
        json={"decision": "approve"},
        headers=auth_headers(company),
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_invalid_decision_value_is_422(async_client, db, student, student_profile, company, admin, college):
    job = await make_job(db, company, colleges=[college])
    application = await make_application(db, student, job)

    response = await async_client.post(
        f"/api/applications/{application.id}/cell-decision",
        json={"decision": "maybe"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 422


# ============================================================
# LISTINGS
# ============================================================

@pytest.mark.asyncio
async def test_college_listing_scoped_to_admin_college(
    async_client, db, student, student_profile, company, admin, other_admin, college
):
    job = await make_job(db, company, colleges=[college])
    await make_application(db, student, job)

    response = await async_client.get("/api/applications/college", headers=auth_headers(admin))
    assert len(response.json()) == 1
    assert response.json()[0]["roll_number"] == "CS2021-042"

    response = await async_client.get("/api/applications/college", headers=auth_headers(other_admin))
    assert response.json() == []


@pytest.mark.asyncio
async def test_college_listing_status_filter(async_client, db, student, student_profile, company, admin, college):
    first = await make_job(db, company, colleges=[college], title="First")
    second = await make_job(db, company, colleges=[college], title="Second")
    await make_application(db, student, first)
    await make_application(db, student, second, ApplicationStatus.CELL_APPROVED)

    response = await async_client.get(
        "/api/applications/college", params={"status": "pending"}, headers=auth_headers(admin)
    )

    assert [a["job_title"] for a in response.json()] == ["First"]


@pytest.mark.asyncio
async def test_company_listing_hides_unreviewed(async_client, db, student, student_profile, company, college):
    jobs = [await make_job(db, company, colleges=[college], title=f"Job {i}") for i in range(5)]
    for job, status in zip(jobs, ApplicationStatus):
        await make_application(db, student, job, status)

    response = await async_client.get("/api/applications/company", headers=auth_headers(company))

    assert sorted(a["status"] for a in response.json()) == [
        "cell_approved",
        "company_approved",
        "company_rejected",
    ]

    response = await async_client.get(
        "/api/applications/company", params={"status": "pending"}, headers=auth_headers(company)
    )
    assert response.json() == []
