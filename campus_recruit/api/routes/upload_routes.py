"""
Upload Routes

POST /upload/resume - Upload a resume (field: resume)
POST /upload/file - Upload any allowed file (field: file)
GET /upload/formats - Supported formats and size limit
"""

from fastapi import APIRouter, Depends, File, UploadFile

from campus_recruit.core.auth import get_current_user
from campus_recruit.schemas.schemas import UploadResponse
from campus_recruit.services.authorization import Principal
from campus_recruit.services.storage import get_storage
from campus_recruit.utils.file_upload import folder_for_content_type, get_supported_formats, read_upload

router = APIRouter(prefix="/upload", tags=["Uploads"])


@router.post("/resume", response_model=UploadResponse)
async def upload_resume(
    resume: UploadFile = File(..., description="Resume file (PDF or Word)"),
    user: Principal = Depends(get_current_user),
):
    """Store a resume and return its URL."""
    content = await read_upload(resume)
    result = get_storage().upload(content, resume.filename, resume.content_type, "campus_resumes")
    return UploadResponse(url=result["url"], public_id=result["public_id"], format=result["format"])


@router.post("/file", response_model=UploadResponse)
async def upload_file(
    file: UploadFile = File(...),
    user: Principal = Depends(get_current_user),
):
    """Store a file; the folder depends on its content type."""
    content = await read_upload(file)
    folder = folder_for_content_type(file.content_type)
    result = get_storage().upload(content, file.filename, file.content_type, folder)
    return UploadResponse(url=result["url"], public_id=result["public_id"], format=result["format"])


@router.get("/formats")
async def upload_formats():
    """Get supported upload formats."""
    return get_supported_formats()
