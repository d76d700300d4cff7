"""
Admin Routes (ADMIN only)

GET /admin/stats - Platform totals
GET /admin/users - Most recent users with profile summary
GET /admin/jobs - Most recent jobs with company and application count
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from typing import List

from campus_recruit.db.database import get_db_session, fetch_all
from campus_recruit.db.tables import applications, company_profiles, jobs, student_profiles, users
from campus_recruit.core.auth import get_current_admin
from campus_recruit.schemas.schemas import (
    AdminJobResponse, AdminStatsResponse, AdminUserResponse, ApplicationStatus, LEGACY_STATUS_ALIASES
)
from campus_recruit.services.authorization import Principal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])

# ACCEPTED plus any legacy spelling that maps to it
_APPROVED_VALUES = [ApplicationStatus.ACCEPTED.value] + [
    legacy for legacy, status in LEGACY_STATUS_ALIASES.items() if status == ApplicationStatus.ACCEPTED
]


@router.get("/stats", response_model=AdminStatsResponse)
async def get_stats(admin: Principal = Depends(get_current_admin)):
    """Counts of users, jobs, applications and accepted applications."""
    with get_db_session() as db:
        total_users = db.execute(select(func.count()).select_from(users)).scalar_one()
        total_jobs = db.execute(select(func.count()).select_from(jobs)).scalar_one()
        total_applications = db.execute(select(func.count()).select_from(applications)).scalar_one()
        approved = db.execute(
            select(func.count()).select_from(applications).where(applications.c.status.in_(_APPROVED_VALUES))
        ).scalar_one()

    return AdminStatsResponse(
        total_users=total_users,
        total_jobs=total_jobs,
        total_applications=total_applications,
        approved_applications=approved,
    )


@router.get("/users", response_model=List[AdminUserResponse])
async def recent_users(
    limit: int = Query(5, ge=1, le=100),
    admin: Principal = Depends(get_current_admin),
):
    """Most recently registered users."""
    stmt = (
        select(
            users.c.id, users.c.name, users.c.email, users.c.role, users.c.created_at,
            student_profiles.c.id.label("student_profile_id"),
            student_profiles.c.phone,
            company_profiles.c.id.label("company_profile_id"),
            company_profiles.c.name.label("company_name"),
        )
        .select_from(
            users
            .outerjoin(student_profiles, student_profiles.c.user_id == users.c.id)
            .outerjoin(company_profiles, company_profiles.c.user_id == users.c.id)
        )
        .order_by(users.c.created_at.desc(), users.c.id.desc())
        .limit(limit)
    )
    with get_db_session() as db:
        rows = fetch_all(db, stmt)

    return [
        AdminUserResponse(
            id=r["id"], name=r["name"], email=r["email"], role=r["role"], created_at=r["created_at"],
            profile={
                "id": r["student_profile_id"] or r["company_profile_id"],
                "phone": r["phone"],
                "company_name": r["company_name"],
            },
        )
        for r in rows
    ]


@router.get("/jobs", response_model=List[AdminJobResponse])
async def recent_jobs(
    limit: int = Query(5, ge=1, le=100),
    admin: Principal = Depends(get_current_admin),
):
    """Most recent jobs with the posting company and number of applications."""
    application_count = (
        select(func.count())
        .select_from(applications)
        .where(applications.c.job_id == jobs.c.id)
        .scalar_subquery()
    )
    stmt = (
        select(
            jobs.c.id, jobs.c.title, jobs.c.created_at,
            company_profiles.c.id.label("company_id"),
            company_profiles.c.name.label("company_name"),
            users.c.name.label("company_user_name"),
            users.c.email.label("company_email"),
            application_count.label("application_count"),
        )
        .select_from(
            jobs
            .join(company_profiles, jobs.c.company_id == company_profiles.c.id)
            .join(users, company_profiles.c.user_id == users.c.id)
        )
        .order_by(jobs.c.created_at.desc(), jobs.c.id.desc())
        .limit(limit)
    )
    with get_db_session() as db:
        rows = fetch_all(db, stmt)

    return [
        AdminJobResponse(
            id=r["id"], title=r["title"], created_at=r["created_at"],
            company={
                "id": r["company_id"],
                "name": r["company_name"] or r["company_user_name"] or "Unknown Company",
                "email": r["company_email"],
            },
            application_count=r["application_count"] or 0,
        )
        for r in rows
    ]
