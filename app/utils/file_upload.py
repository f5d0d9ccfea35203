"""
File Upload Utility - validate and read resume uploads.

Supported formats: .pdf, .doc, .docx, .txt
The whole body is read into memory before it is handed to the resume store.
"""

import re
from dataclasses import dataclass
from typing import Optional

from starlette.datastructures import UploadFile

from app.core.errors import BadRequest, PayloadTooLarge


ALLOWED_EXTENSIONS = {'.pdf', '.doc', '.docx', '.txt'}
DEFAULT_CONTENT_TYPES = {
    '.pdf': 'application/pdf',
    '.doc': 'application/msword',
    '.docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    '.txt': 'text/plain',
}

_UNSAFE_CHARS = re.compile(r'[^A-Za-z0-9._-]+')


@dataclass
class ResumeUpload:
    filename: str
    content: bytes
    content_type: str


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def sanitize_filename(filename: str) -> str:
    """Strip directory parts and characters that do not belong in an object key."""
    name = filename.replace('\\', '/').rsplit('/', 1)[-1]
    name = _UNSAFE_CHARS.sub('_', name).strip('._')
    return name or 'resume'


def is_upload(value: object) -> bool:
    """True for a form value that is a file with a name."""
    return isinstance(value, UploadFile) and bool(value.filename)


async def read_resume_upload(file: UploadFile, max_size_mb: int = 5) -> ResumeUpload:
    """
    Validate and read an uploaded resume.

    Raises:
        BadRequest for a missing filename, an unsupported type or an empty file
        PayloadTooLarge when the body exceeds max_size_mb
    """
    if not file.filename:
        raise BadRequest("No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise BadRequest(
            f"Unsupported file type '{ext}'. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )

    max_bytes = max_size_mb * 1024 * 1024
    # Read one byte past the limit so oversize files are detected without
    # buffering all of them
    content = await file.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise PayloadTooLarge(f"File too large. Maximum size: {max_size_mb}MB")
    if not content:
        raise BadRequest("Uploaded file is empty")

    return ResumeUpload(
        filename=sanitize_filename(file.filename),
        content=content,
        content_type=_content_type(file.content_type, ext),
    )


def _content_type(declared: Optional[str], ext: str) -> str:
    if declared and declared != 'application/octet-stream':
        return declared
    return DEFAULT_CONTENT_TYPES[ext]
