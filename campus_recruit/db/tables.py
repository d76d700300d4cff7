"""
Relational schema (SQLAlchemy Core).

Tables:
- users             - identity + role (STUDENT / COMPANY / ADMIN)
- student_profiles  - 1:1 with a STUDENT user
- company_profiles  - 1:1 with a COMPANY user
- jobs              - owned by one company profile
- applications      - one student -> one job, carries the workflow status

The (student_id, job_id) unique constraint on applications is the
authoritative duplicate guard; the pre-insert check only exists to produce
a friendly 409.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON, Column, DateTime, ForeignKey, Integer, MetaData, String, Table, Text,
    UniqueConstraint,
)


def utcnow() -> datetime:
    """Naive UTC timestamp (stored without tz on every backend)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


metadata = MetaData()


users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(120), nullable=False),
    Column("email", String(255), nullable=False, unique=True, index=True),
    Column("password_hash", String(255), nullable=False),
    Column("role", String(20), nullable=False),
    Column("created_at", DateTime, nullable=False, default=utcnow),
)

student_profiles = Table(
    "student_profiles",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False, unique=True),
    Column("phone", String(40)),
    Column("location", String(200)),
    Column("education", Text),
    Column("bio", Text),
    Column("experience", Text),
    Column("linkedin", String(500)),
    Column("github", String(500)),
    Column("website", String(500)),
    Column("skills", JSON, nullable=False, default=list),
    Column("resume_url", String(1000)),
    Column("profile_image_url", String(1000)),
    Column("created_at", DateTime, nullable=False, default=utcnow),
)

company_profiles = Table(
    "company_profiles",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False, unique=True),
    Column("name", String(200)),
    Column("website", String(500)),
    Column("created_at", DateTime, nullable=False, default=utcnow),
)

jobs = Table(
    "jobs",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("company_id", Integer, ForeignKey("company_profiles.id"), nullable=False, index=True),
    Column("title", String(200), nullable=False),
    Column("description", Text, nullable=False),
    Column("location", String(200)),
    Column("created_at", DateTime, nullable=False, default=utcnow),
)

applications = Table(
    "applications",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("student_id", Integer, ForeignKey("student_profiles.id"), nullable=False, index=True),
    Column("job_id", Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("status", String(20), nullable=False, default="PENDING"),
    Column("message", Text),
    Column("created_at", DateTime, nullable=False, default=utcnow),
    Column("updated_at", DateTime, nullable=False, default=utcnow, onupdate=utcnow),
    UniqueConstraint("student_id", "job_id", name="uq_application_student_job"),
)
