"""
Schemas module - Request/Response schemas for API endpoints.
"""

from campus_recruit.schemas.schemas import ApplicationStatus, UserRole

__all__ = ["ApplicationStatus", "UserRole"]
