"""
Application Routes

GET /applications/me - Student's own applications (job + company)
GET /applications/company - Company's received applications (job + student)
GET /applications/company/applications - Flat dashboard listing for companies
GET /applications/jobs/{job_id} - Applications for one of the company's jobs
PATCH /applications/{application_id} - Company updates status (sends email)
"""

from fastapi import APIRouter, Depends
from typing import List

from campus_recruit.db.database import get_db_session
from campus_recruit.core.auth import get_current_student, get_current_company
from campus_recruit.schemas.schemas import (
    ApplicationResponse, ApplicationStatusUpdate, StudentApplicationResponse,
    CompanyApplicationResponse, ApplicationOverviewResponse
)
from campus_recruit.services.authorization import Principal
from campus_recruit.services.notifications import get_dispatcher
from campus_recruit.services.workflow import get_application_workflow

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.get("/me", response_model=List[StudentApplicationResponse])
async def my_applications(student: Principal = Depends(get_current_student)):
    """List my applications, newest first."""
    with get_db_session() as db:
        return get_application_workflow().list_for_student(db, student)


@router.get("/company", response_model=List[CompanyApplicationResponse])
async def company_applications(company: Principal = Depends(get_current_company)):
    """
    List applications for all of my jobs, newest first.

    Student resume links are absolute so clients can open them directly.
    """
    with get_db_session() as db:
        return get_application_workflow().list_for_company(db, company)


@router.get("/company/applications", response_model=List[ApplicationOverviewResponse])
async def company_applications_overview(company: Principal = Depends(get_current_company)):
    """Dashboard listing: one flat row per application."""
    with get_db_session() as db:
        return get_application_workflow().list_company_overview(db, company)


@router.get("/jobs/{job_id}", response_model=List[CompanyApplicationResponse])
async def job_applications(job_id: int, company: Principal = Depends(get_current_company)):
    """Applications for a single job I own (empty list if nobody applied yet)."""
    with get_db_session() as db:
        return get_application_workflow().list_for_job(db, company, job_id)


@router.patch("/{application_id}", response_model=ApplicationResponse)
async def update_application_status(
    application_id: int,
    update: ApplicationStatusUpdate,
    company: Principal = Depends(get_current_company),
):
    """
    Update the status of an application for one of my jobs.

    ACCEPTED sends an offer email, INTERVIEW an interview invite. The email
    goes out after the change is committed; if it fails the update still
    succeeds.
    """
    with get_db_session() as db:
        application, event = get_application_workflow().update_status(
            db, company, application_id, update.status, update.message
        )

    await get_dispatcher().deliver(event)
    return application
