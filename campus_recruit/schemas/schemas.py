"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
JSON on the wire is camelCase (resumeUrl, createdAt, ...); requests accept
either camelCase or snake_case.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime
from enum import Enum


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    STUDENT = "STUDENT"
    COMPANY = "COMPANY"
    ADMIN = "ADMIN"


class ApplicationStatus(str, Enum):
    PENDING = "PENDING"
    INTERVIEW = "INTERVIEW"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


# Older rows/read paths used APPROVED for what is now ACCEPTED
LEGACY_STATUS_ALIASES = {"APPROVED": ApplicationStatus.ACCEPTED}


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole
    company_name: Optional[str] = Field(None, max_length=200)

class LoginRequest(CamelModel):
    email: EmailStr
    password: str

class UserResponse(CamelModel):
    id: int
    name: str
    email: str
    role: UserRole
    created_at: Optional[datetime] = None

class TokenResponse(CamelModel):
    token: str
    token_type: str = "bearer"
    user: UserResponse

class AccountUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    location: Optional[str] = None

class JobUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = None

class CompanySummary(CamelModel):
    id: int
    name: Optional[str] = None
    website: Optional[str] = None
    user_id: Optional[int] = None

class JobResponse(CamelModel):
    id: int
    company_id: int
    title: str
    description: str
    location: Optional[str] = None
    created_at: datetime
    company: Optional[CompanySummary] = None


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplyRequest(CamelModel):
    phone: Optional[str] = None
    resume_url: Optional[str] = None

class ApplicationStatusUpdate(CamelModel):
    status: Optional[ApplicationStatus] = None
    message: Optional[str] = None

class ApplicationResponse(CamelModel):
    id: int
    student_id: int
    job_id: int
    status: ApplicationStatus
    message: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

class StudentUserSummary(CamelModel):
    id: int
    name: str
    email: str

class StudentSummary(CamelModel):
    id: int
    user_id: int
    phone: Optional[str] = None
    location: Optional[str] = None
    education: Optional[str] = None
    skills: List[str] = []
    resume_url: Optional[str] = None
    profile_image_url: Optional[str] = None
    user: StudentUserSummary

class StudentApplicationResponse(ApplicationResponse):
    job: JobResponse

class CompanyApplicationResponse(ApplicationResponse):
    job: JobResponse
    student: StudentSummary

class ApplicationOverviewResponse(ApplicationResponse):
    job_title: str
    company_name: Optional[str] = None
    student_name: str
    student_email: str


# ============================================================
# STUDENT PROFILE SCHEMAS
# ============================================================

class ProfileStats(CamelModel):
    applications: int = 0
    interviews: int = 0
    offers: int = 0

class StudentProfileResponse(CamelModel):
    id: int
    name: str
    email: str
    phone: str = ""
    location: str = ""
    education: str = ""
    skills: List[str] = []
    bio: str = ""
    linkedin: str = ""
    github: str = ""
    website: str = ""
    experience: str = ""
    profile_image_url: str = ""
    resume_url: str = ""
    stats: ProfileStats


# ============================================================
# UPLOAD SCHEMAS
# ============================================================

class UploadResponse(CamelModel):
    success: bool = True
    url: str
    public_id: str
    format: Optional[str] = None


# ============================================================
# ADMIN SCHEMAS
# ============================================================

class AdminStatsResponse(CamelModel):
    total_users: int
    total_jobs: int
    total_applications: int
    approved_applications: int

class AdminProfileSummary(CamelModel):
    id: Optional[int] = None
    phone: Optional[str] = None
    company_name: Optional[str] = None

class AdminUserResponse(CamelModel):
    id: int
    name: str
    email: str
    role: UserRole
    status: str = "ACTIVE"
    created_at: datetime
    profile: AdminProfileSummary

class AdminJobCompany(CamelModel):
    id: Optional[int] = None
    name: str
    email: Optional[str] = None

class AdminJobResponse(CamelModel):
    id: int
    title: str
    status: str = "ACTIVE"
    created_at: datetime
    company: AdminJobCompany
    application_count: int = 0


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(CamelModel):
    message: str
    success: bool = True
