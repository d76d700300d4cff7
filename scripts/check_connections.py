#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the database and SMTP settings before starting the API.
Usage: python scripts/check_connections.py
"""
import smtplib
import sys
sys.path.insert(0, '.')

from campus_recruit.core.config import get_settings
from campus_recruit.db.database import check_database_connection


def check_smtp(settings) -> bool:
    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=settings.email_timeout_seconds) as smtp:
            if settings.smtp_use_tls:
                smtp.starttls()
            if settings.smtp_user:
                smtp.login(settings.smtp_user, settings.smtp_password)
            smtp.noop()
        return True
    except (smtplib.SMTPException, OSError) as e:
        print(f"    SMTP error: {e}")
        return False


def main():
    settings = get_settings()
    ok = True
    print("=" * 50)
    print("CAMPUS RECRUIT - CONNECTION CHECK")
    print("=" * 50)

    # Database
    print("\n[1] Checking database...")
    print(f"    URL: {settings.sqlalchemy_url.split('@')[-1]}")
    if check_database_connection():
        print("    ✅ Database: CONNECTED")
    else:
        print("    ❌ Database: FAILED")
        ok = False

    # SMTP (only if a host is set)
    print("\n[2] Checking SMTP...")
    if settings.smtp_host:
        print(f"    Host: {settings.smtp_host}:{settings.smtp_port}")
        if check_smtp(settings):
            print("    ✅ SMTP: CONNECTED")
        else:
            print("    ❌ SMTP: FAILED")
            ok = False
    else:
        print("    ⚠️  SMTP: host not configured, emails will only be logged")

    # Storage
    print("\n[3] Upload storage...")
    if settings.storage_type == "s3":
        print(f"    S3 bucket: {settings.s3_bucket_name} ({settings.aws_region})")
    else:
        print(f"    Local directory: {settings.upload_dir}")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
