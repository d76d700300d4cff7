"""
Job Routes

GET /jobs - List jobs with filters (public)
GET /jobs/{job_id} - Get job details (public)
POST /jobs - Create job posting (company only)
PUT /jobs/{job_id} - Update job (owning company only)
DELETE /jobs/{job_id} - Delete job and its applications (owning company only)
POST /jobs/{job_id}/apply - Apply to job (student only)
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import delete, func, insert, or_, select, update
from typing import List, Optional

from campus_recruit.db.database import get_db_session, fetch_all, fetch_one
from campus_recruit.db.tables import applications, company_profiles, jobs, utcnow
from campus_recruit.core.auth import get_current_student, get_current_company
from campus_recruit.core.errors import JobNotFound
from campus_recruit.schemas.schemas import (
    JobCreate, JobUpdate, JobResponse, ApplyRequest, ApplicationResponse, MessageResponse, UserRole
)
from campus_recruit.services.authorization import (
    Ownership, Principal, authorize, enforce, get_company_profile,
)
from campus_recruit.services.workflow import get_application_workflow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def _job_with_company(db, job_id: int) -> Optional[dict]:
    row = fetch_one(
        db,
        select(
            jobs,
            company_profiles.c.name.label("company_name"),
            company_profiles.c.website.label("company_website"),
            company_profiles.c.user_id.label("company_user_id"),
        )
        .join(company_profiles, jobs.c.company_id == company_profiles.c.id)
        .where(jobs.c.id == job_id),
    )
    return _to_job(row) if row else None


def _to_job(row: dict) -> dict:
    job = {k: row[k] for k in ("id", "company_id", "title", "description", "location", "created_at")}
    job["company"] = {
        "id": row["company_id"],
        "name": row.get("company_name"),
        "website": row.get("company_website"),
        "user_id": row.get("company_user_id"),
    }
    return job


def _owned_job(db, job_id: int, company: Principal) -> dict:
    """Load a job and check the caller's company profile owns it (404, then 403)."""
    job = fetch_one(db, select(jobs).where(jobs.c.id == job_id))
    if not job:
        raise JobNotFound()
    profile = get_company_profile(db, company, required=False)
    enforce(authorize(
        company, {UserRole.COMPANY},
        Ownership(job["company_id"], profile["id"] if profile else None),
    ))
    return job


@router.get("", response_model=List[JobResponse])
async def list_jobs(
    q: Optional[str] = Query(None, description="Search in title and description"),
    location: Optional[str] = Query(None),
    company_id: Optional[int] = Query(None, alias="companyId"),
):
    """List job postings, newest first."""
    stmt = (
        select(
            jobs,
            company_profiles.c.name.label("company_name"),
            company_profiles.c.website.label("company_website"),
            company_profiles.c.user_id.label("company_user_id"),
        )
        .join(company_profiles, jobs.c.company_id == company_profiles.c.id)
    )

    if q:
        pattern = f"%{q.lower()}%"
        stmt = stmt.where(or_(
            func.lower(jobs.c.title).like(pattern),
            func.lower(jobs.c.description).like(pattern),
        ))
    if location:
        stmt = stmt.where(func.lower(jobs.c.location).like(f"%{location.lower()}%"))
    if company_id:
        stmt = stmt.where(jobs.c.company_id == company_id)

    stmt = stmt.order_by(jobs.c.created_at.desc(), jobs.c.id.desc())

    with get_db_session() as db:
        rows = fetch_all(db, stmt)
    return [_to_job(r) for r in rows]


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: int):
    """Get details of a specific job."""
    with get_db_session() as db:
        job = _job_with_company(db, job_id)
    if not job:
        raise JobNotFound()
    return job


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(job: JobCreate, company: Principal = Depends(get_current_company)):
    """Create a new job posting. Only companies can create jobs."""
    with get_db_session() as db:
        profile = get_company_profile(db, company)
        result = db.execute(
            insert(jobs).values(
                company_id=profile["id"], title=job.title, description=job.description,
                location=job.location, created_at=utcnow(),
            )
        )
        job_id = result.inserted_primary_key[0]
        created = _job_with_company(db, job_id)

    logger.info("Company %s posted job %s", profile["id"], job_id)
    return created


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(job_id: int, data: JobUpdate, company: Principal = Depends(get_current_company)):
    """Update a job posting. Only the owning company can update."""
    with get_db_session() as db:
        _owned_job(db, job_id, company)

        values = {
            field: getattr(data, field)
            for field in ("title", "description", "location")
            if getattr(data, field) is not None
        }
        if values:
            db.execute(update(jobs).where(jobs.c.id == job_id).values(**values))
        updated = _job_with_company(db, job_id)

    return updated


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(job_id: int, company: Principal = Depends(get_current_company)):
    """Delete a job posting together with every application for it."""
    with get_db_session() as db:
        _owned_job(db, job_id, company)
        removed = db.execute(delete(applications).where(applications.c.job_id == job_id)).rowcount
        db.execute(delete(jobs).where(jobs.c.id == job_id))

    logger.info("Deleted job %s and %s application(s)", job_id, removed)
    return MessageResponse(message="Deleted")


@router.post("/{job_id}/apply", response_model=ApplicationResponse, status_code=201)
async def apply_to_job(
    job_id: int,
    body: Optional[ApplyRequest] = None,
    student: Principal = Depends(get_current_student),
):
    """Apply to a job. Students only. Cannot apply twice to same job."""
    body = body or ApplyRequest()
    with get_db_session() as db:
        application = get_application_workflow().apply(
            db, student, job_id, phone=body.phone, resume_url=body.resume_url
        )
    return application
