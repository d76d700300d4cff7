"""
Student Routes

GET /student/profile - Get own profile with application stats
PUT /student/profile - Update profile (multipart form, optional resume/image files)
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy import func, insert, select, update
from typing import Optional

from campus_recruit.db.database import get_db_session, fetch_all, fetch_one
from campus_recruit.db.tables import applications, student_profiles, users, utcnow
from campus_recruit.core.auth import get_current_student
from campus_recruit.schemas.schemas import (
    ApplicationStatus, MessageResponse, ProfileStats, StudentProfileResponse
)
from campus_recruit.services.authorization import Principal
from campus_recruit.services.storage import get_storage
from campus_recruit.services.workflow import normalize_status
from campus_recruit.utils.file_upload import IMAGE_CONTENT_TYPES, read_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/student", tags=["Students"])

_TEXT_FIELDS = ("phone", "location", "education", "bio", "linkedin", "github", "website", "experience")


def _profile_stats(db, student_id: int) -> ProfileStats:
    rows = fetch_all(
        db,
        select(applications.c.status, func.count().label("n"))
        .where(applications.c.student_id == student_id)
        .group_by(applications.c.status),
    )
    counts = {}
    for r in rows:
        status = normalize_status(r["status"])
        counts[status] = counts.get(status, 0) + r["n"]
    return ProfileStats(
        applications=sum(counts.values()),
        interviews=counts.get(ApplicationStatus.INTERVIEW, 0),
        offers=counts.get(ApplicationStatus.ACCEPTED, 0),
    )


def _discard_uploads(storage, stored) -> None:
    """Remove files stored for an update that did not go through."""
    for uploaded in stored:
        try:
            storage.delete(uploaded)
        except Exception:
            logger.exception("Could not remove orphaned upload %s", uploaded.get("public_id"))


@router.get("/profile", response_model=StudentProfileResponse)
async def get_profile(student: Principal = Depends(get_current_student)):
    """Get current student's profile. Missing values come back as empty strings."""
    with get_db_session() as db:
        user = fetch_one(db, select(users.c.id, users.c.name, users.c.email).where(users.c.id == student.id))
        profile = fetch_one(db, select(student_profiles).where(student_profiles.c.user_id == student.id)) or {}
        stats = _profile_stats(db, profile["id"]) if profile else ProfileStats()

    payload = {field: profile.get(field) or "" for field in _TEXT_FIELDS}
    return StudentProfileResponse(
        id=user["id"],
        name=user["name"],
        email=user["email"],
        skills=profile.get("skills") or [],
        profile_image_url=profile.get("profile_image_url") or "",
        resume_url=profile.get("resume_url") or "",
        stats=stats,
        **payload,
    )


@router.put("/profile", response_model=MessageResponse)
async def update_profile(
    name: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    education: Optional[str] = Form(None),
    skills: Optional[str] = Form(None, description="Comma-separated"),
    bio: Optional[str] = Form(None),
    linkedin: Optional[str] = Form(None),
    github: Optional[str] = Form(None),
    website: Optional[str] = Form(None),
    experience: Optional[str] = Form(None),
    profileImage: Optional[UploadFile] = File(None),
    resume: Optional[UploadFile] = File(None),
    student: Principal = Depends(get_current_student),
):
    """
    Update the student profile. Only provided fields are changed.

    Files are validated before anything is stored; the stored references
    replace the old ones and are removed again if the update fails.
    The profile row is created if it does not exist yet.
    """
    storage = get_storage()
    values = {}

    # Validate every file before anything is stored
    pending = []
    if profileImage is not None and profileImage.filename:
        content = await read_upload(profileImage, IMAGE_CONTENT_TYPES)
        pending.append(("profile_image_url", profileImage, content, "campus_profile_images"))
    if resume is not None and resume.filename:
        content = await read_upload(resume)
        pending.append(("resume_url", resume, content, "campus_resumes"))

    form = {"phone": phone, "location": location, "education": education, "bio": bio,
            "linkedin": linkedin, "github": github, "website": website, "experience": experience}
    values.update({k: v for k, v in form.items() if v is not None})

    if skills:
        parsed = [s.strip() for s in skills.split(",") if s.strip()]
        if parsed:
            values["skills"] = parsed

    stored = []
    try:
        for field, upload, content, folder in pending:
            uploaded = storage.upload(content, upload.filename, upload.content_type, folder)
            stored.append(uploaded)
            values[field] = uploaded["url"]

        with get_db_session() as db:
            if name:
                db.execute(update(users).where(users.c.id == student.id).values(name=name))

            existing = fetch_one(db, select(student_profiles.c.id).where(student_profiles.c.user_id == student.id))
            if existing:
                if values:
                    db.execute(update(student_profiles).where(student_profiles.c.id == existing["id"]).values(**values))
            else:
                values.setdefault("skills", [])
                db.execute(insert(student_profiles).values(user_id=student.id, created_at=utcnow(), **values))
    except Exception:
        _discard_uploads(storage, stored)
        raise

    logger.info("Student %s updated profile fields: %s", student.id, sorted(values))
    return MessageResponse(message="Profile updated")
