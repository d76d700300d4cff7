"""
Campus Recruit
Backend for campus recruitment: companies post jobs, students apply,
companies move applications through PENDING / INTERVIEW / ACCEPTED / REJECTED
and students are emailed about offers and interview invites.

Architecture:
- FastAPI routes under /api
- Relational store via SQLAlchemy (PostgreSQL in production)
- SMTP for notifications, local disk or S3 for uploads
"""

__version__ = "1.0.0"
