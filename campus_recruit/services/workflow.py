"""
Application Workflow Engine

Owns the Application lifecycle:
- apply:           STUDENT creates an application (status PENDING)
- list_*:          role-scoped read models (student, company, per job)
- update_status:   the owning COMPANY moves an application to a new status

STATE MACHINE:
    PENDING / INTERVIEW / ACCEPTED / REJECTED, initial PENDING.
    Any status may overwrite any other (ALLOWED_TRANSITIONS is permissive).
    Which email a transition sends is decided by TRANSITION_NOTIFICATIONS.

COMMIT, THEN NOTIFY:
    update_status() returns (application, OutboundEvent | None). The route
    lets the session commit first and only then passes the event to the
    Notification Dispatcher, so a failed email can never roll back or fail
    the status change.

Every operation receives an open session (see db.get_db_session) and the
authenticated Principal; the caller's profile is looked up from its user id.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError

from campus_recruit.core.config import get_settings
from campus_recruit.core.errors import (
    ApplicationNotFound, DuplicateApplication, JobNotFound, ValidationFailed,
)
from campus_recruit.db.database import fetch_all, fetch_one
from campus_recruit.db.tables import (
    applications, company_profiles, jobs, student_profiles, users, utcnow,
)
from campus_recruit.schemas.schemas import (
    ApplicationStatus, LEGACY_STATUS_ALIASES, UserRole,
)
from campus_recruit.services.authorization import (
    Ownership, Principal, authorize, enforce, get_company_profile, get_student_profile,
    require_role,
)
from campus_recruit.services.notifications import NotificationKind, OutboundEvent

logger = logging.getLogger(__name__)


# ============================================================
# TRANSITION RULES
# ============================================================

ALLOWED_TRANSITIONS = {
    current: set(ApplicationStatus) for current in ApplicationStatus
}

TRANSITION_NOTIFICATIONS = {
    ApplicationStatus.ACCEPTED: NotificationKind.OFFER,
    ApplicationStatus.INTERVIEW: NotificationKind.INTERVIEW_INVITE,
    ApplicationStatus.REJECTED: None,
    ApplicationStatus.PENDING: None,
}


def normalize_status(value) -> ApplicationStatus:
    """Map stored status strings (including legacy aliases) to ApplicationStatus."""
    if isinstance(value, ApplicationStatus):
        return value
    if value in LEGACY_STATUS_ALIASES:
        return LEGACY_STATUS_ALIASES[value]
    return ApplicationStatus(value)


def notification_for(target: ApplicationStatus) -> Optional[NotificationKind]:
    return TRANSITION_NOTIFICATIONS.get(target)


# ============================================================
# ROW HELPERS
# ============================================================

def _prefixed(table, prefix: str) -> list:
    return [column.label(f"{prefix}{column.name}") for column in table.c]


def _unprefix(row: dict, prefix: str) -> dict:
    return {key[len(prefix):]: value for key, value in row.items() if key.startswith(prefix)}


def _application(row: dict) -> dict:
    row = dict(row)
    row["status"] = normalize_status(row["status"])
    return row


def absolute_url(reference: Optional[str], base_url: str) -> Optional[str]:
    """Prefix a relative stored reference (e.g. /uploads/...) with the public base URL."""
    if not reference:
        return None
    if reference.startswith(("http://", "https://")):
        return reference
    if not reference.startswith("/"):
        reference = "/" + reference
    return base_url.rstrip("/") + reference


class ApplicationWorkflow:
    """
    Application lifecycle operations.

    Stateless apart from the public base URL used for resume links, so one
    instance is shared (see get_application_workflow()).
    """

    def __init__(self, public_base_url: Optional[str] = None):
        self.public_base_url = public_base_url or get_settings().public_base_url

    # --------------------------------------------------------
    # apply
    # --------------------------------------------------------

    def apply(
        self,
        db,
        principal: Principal,
        job_id: int,
        phone: Optional[str] = None,
        resume_url: Optional[str] = None,
    ) -> dict:
        """
        Create a PENDING application for the calling student.

        Raises:
            ProfileMissing (400), JobNotFound (404), DuplicateApplication (409)
        """
        require_role(principal, UserRole.STUDENT)
        student = get_student_profile(db, principal)

        job = fetch_one(db, select(jobs.c.id).where(jobs.c.id == job_id))
        if not job:
            raise JobNotFound()

        existing = fetch_one(
            db,
            select(applications.c.id).where(
                applications.c.student_id == student["id"],
                applications.c.job_id == job_id,
            ),
        )
        if existing:
            raise DuplicateApplication()

        # Partial update: only non-empty fields; "" never clears a stored value
        contact = {
            key: value
            for key, value in (("phone", phone), ("resume_url", resume_url))
            if value
        }
        if contact:
            db.execute(
                update(student_profiles)
                .where(student_profiles.c.id == student["id"])
                .values(**contact)
            )

        now = utcnow()
        try:
            result = db.execute(
                insert(applications).values(
                    student_id=student["id"],
                    job_id=job_id,
                    status=ApplicationStatus.PENDING.value,
                    created_at=now,
                    updated_at=now,
                )
            )
        except IntegrityError:
            # Lost a race with a concurrent apply; the unique constraint decided
            logger.info("Duplicate application rejected by constraint: student=%s job=%s",
                        student["id"], job_id)
            raise DuplicateApplication()

        application_id = result.inserted_primary_key[0]
        logger.info("Student %s applied to job %s (application %s)",
                    student["id"], job_id, application_id)
        return self._get_application(db, application_id)

    # --------------------------------------------------------
    # read models
    # --------------------------------------------------------

    def list_for_student(self, db, principal: Principal) -> List[dict]:
        """The student's applications with job + company, newest first."""
        require_role(principal, UserRole.STUDENT)
        student = get_student_profile(db, principal)

        stmt = (
            select(
                *_prefixed(applications, "a_"),
                *_prefixed(jobs, "j_"),
                *_prefixed(company_profiles, "c_"),
            )
            .select_from(
                applications
                .join(jobs, applications.c.job_id == jobs.c.id)
                .join(company_profiles, jobs.c.company_id == company_profiles.c.id)
            )
            .where(applications.c.student_id == student["id"])
            .order_by(applications.c.created_at.desc(), applications.c.id.desc())
        )

        results = []
        for row in fetch_all(db, stmt):
            item = _application(_unprefix(row, "a_"))
            item["job"] = _unprefix(row, "j_")
            item["job"]["company"] = _unprefix(row, "c_")
            results.append(item)
        return results

    def list_for_company(self, db, principal: Principal) -> List[dict]:
        """
        Applications for every job the calling company owns, newest first,
        with job + student + student user. Resume links are made absolute.
        """
        require_role(principal, UserRole.COMPANY)
        company = get_company_profile(db, principal)
        return self._company_applications(db, jobs.c.company_id == company["id"])

    def list_for_job(self, db, principal: Principal, job_id: int) -> List[dict]:
        """Applications for one of the caller's jobs; empty list when there are none."""
        require_role(principal, UserRole.COMPANY)
        company = get_company_profile(db, principal, required=False)

        job = fetch_one(db, select(jobs.c.id, jobs.c.company_id).where(jobs.c.id == job_id))
        if not job:
            raise JobNotFound()
        enforce(authorize(
            principal, {UserRole.COMPANY},
            Ownership(job["company_id"], company["id"] if company else None),
        ))

        return self._company_applications(db, jobs.c.id == job_id)

    def list_company_overview(self, db, principal: Principal) -> List[dict]:
        """Flat dashboard listing: job title, company name and student contact per application."""
        require_role(principal, UserRole.COMPANY)
        company = get_company_profile(db, principal)

        stmt = (
            select(
                *_prefixed(applications, "a_"),
                jobs.c.title.label("job_title"),
                company_profiles.c.name.label("company_name"),
                users.c.name.label("student_name"),
                users.c.email.label("student_email"),
            )
            .select_from(
                applications
                .join(jobs, applications.c.job_id == jobs.c.id)
                .join(company_profiles, jobs.c.company_id == company_profiles.c.id)
                .join(student_profiles, applications.c.student_id == student_profiles.c.id)
                .join(users, student_profiles.c.user_id == users.c.id)
            )
            .where(jobs.c.company_id == company["id"])
            .order_by(applications.c.created_at.desc(), applications.c.id.desc())
        )

        results = []
        for row in fetch_all(db, stmt):
            item = _application(_unprefix(row, "a_"))
            item["job_title"] = row["job_title"]
            item["company_name"] = row["company_name"] or principal.name
            item["student_name"] = row["student_name"]
            item["student_email"] = row["student_email"]
            results.append(item)
        return results

    # --------------------------------------------------------
    # update_status
    # --------------------------------------------------------

    def update_status(
        self,
        db,
        principal: Principal,
        application_id: int,
        new_status: Optional[ApplicationStatus] = None,
        message: Optional[str] = None,
    ) -> Tuple[dict, Optional[OutboundEvent]]:
        """
        Overwrite an application's status as the owning company.

        Returns the updated application and the notification the transition
        asks for (None when it asks for none). The event must only be
        delivered after the session has committed.

        Raises:
            ApplicationNotFound (404), Forbidden (403)
        """
        require_role(principal, UserRole.COMPANY)
        company = get_company_profile(db, principal, required=False)

        stmt = (
            select(
                applications.c.id,
                applications.c.status,
                jobs.c.company_id.label("job_company_id"),
                jobs.c.title.label("job_title"),
                users.c.name.label("student_name"),
                users.c.email.label("student_email"),
            )
            .select_from(
                applications
                .join(jobs, applications.c.job_id == jobs.c.id)
                .join(student_profiles, applications.c.student_id == student_profiles.c.id)
                .join(users, student_profiles.c.user_id == users.c.id)
            )
            .where(applications.c.id == application_id)
        )
        current = fetch_one(db, stmt)
        if not current:
            raise ApplicationNotFound()

        decision = authorize(
            principal, {UserRole.COMPANY},
            Ownership(current["job_company_id"], company["id"] if company else None),
        )
        if not decision:
            logger.warning("User %s denied status update on application %s: %s",
                           principal.id, application_id, decision.reason)
        enforce(decision)

        current_status = normalize_status(current["status"])
        target = new_status or current_status
        if target not in ALLOWED_TRANSITIONS[current_status]:
            raise ValidationFailed(
                f"Cannot move application from {current_status.value} to {target.value}"
            )

        values = {"status": target.value, "updated_at": utcnow()}
        if message is not None:
            values["message"] = message
        db.execute(update(applications).where(applications.c.id == application_id).values(**values))
        logger.info("Application %s: %s -> %s", application_id, current_status.value, target.value)

        event = None
        kind = notification_for(new_status) if new_status else None
        if kind is not None:
            event = OutboundEvent(
                kind=kind,
                to=current["student_email"],
                student_name=current["student_name"],
                company_name=company["name"] or principal.name,
                job_title=current["job_title"],
                message=message or "",
            )

        return self._get_application(db, application_id), event

    # --------------------------------------------------------
    # internals
    # --------------------------------------------------------

    def _get_application(self, db, application_id: int) -> dict:
        row = fetch_one(db, select(applications).where(applications.c.id == application_id))
        if not row:
            raise ApplicationNotFound()
        return _application(row)

    def _company_applications(self, db, condition) -> List[dict]:
        stmt = (
            select(
                *_prefixed(applications, "a_"),
                *_prefixed(jobs, "j_"),
                *_prefixed(student_profiles, "s_"),
                *_prefixed(users, "u_"),
            )
            .select_from(
                applications
                .join(jobs, applications.c.job_id == jobs.c.id)
                .join(student_profiles, applications.c.student_id == student_profiles.c.id)
                .join(users, student_profiles.c.user_id == users.c.id)
            )
            .where(condition)
            .order_by(applications.c.created_at.desc(), applications.c.id.desc())
        )

        results = []
        for row in fetch_all(db, stmt):
            item = _application(_unprefix(row, "a_"))
            item["job"] = _unprefix(row, "j_")
            student = _unprefix(row, "s_")
            student["skills"] = student.get("skills") or []
            student["resume_url"] = absolute_url(student.get("resume_url"), self.public_base_url)
            user = _unprefix(row, "u_")
            student["user"] = {"id": user["id"], "name": user["name"], "email": user["email"]}
            item["student"] = student
            results.append(item)
        return results


_workflow: ApplicationWorkflow = None


def get_application_workflow() -> ApplicationWorkflow:
    """Get or create the workflow engine (singleton)."""
    global _workflow
    if _workflow is None:
        _workflow = ApplicationWorkflow()
    return _workflow
