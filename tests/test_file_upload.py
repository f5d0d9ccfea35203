import asyncio
import io

import pytest
from starlette.datastructures import Headers, UploadFile

from app.core.errors import BadRequest, PayloadTooLarge
from app.utils.file_upload import get_file_extension, is_upload, read_resume_upload, sanitize_filename


def make_upload(filename, content, content_type=None):
    headers = Headers({"content-type": content_type}) if content_type else None
    return UploadFile(file=io.BytesIO(content), filename=filename, headers=headers)


def read(upload, max_size_mb=5):
    return asyncio.run(read_resume_upload(upload, max_size_mb))


def test_reads_supported_resume():
    result = read(make_upload("My CV.PDF", b"%PDF-1.4", "application/pdf"))
    assert result.filename == "My_CV.PDF"
    assert result.content == b"%PDF-1.4"
    assert result.content_type == "application/pdf"


def test_content_type_falls_back_to_extension():
    result = read(make_upload("cv.docx", b"PK\x03\x04", "application/octet-stream"))
    assert result.content_type == "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

    assert read(make_upload("cv.txt", b"plain")).content_type == "text/plain"


def test_rejects_unsupported_extension():
    with pytest.raises(BadRequest, match="Unsupported file type '.exe'"):
        read(make_upload("cv.exe", b"MZ"))


def test_rejects_empty_file():
    with pytest.raises(BadRequest, match="empty"):
        read(make_upload("cv.pdf", b""))


def test_rejects_file_over_limit():
    with pytest.raises(PayloadTooLarge):
        read(make_upload("cv.pdf", b"x" * (1024 * 1024 + 1)), max_size_mb=1)


def test_accepts_file_at_limit():
    assert len(read(make_upload("cv.pdf", b"x" * 1024 * 1024), max_size_mb=1).content) == 1024 * 1024


def test_rejects_missing_filename():
    with pytest.raises(BadRequest):
        read(make_upload("", b"data"))


def test_extension_and_filename_helpers():
    assert get_file_extension("archive.tar.PDF") == ".pdf"
    assert get_file_extension("README") == ""
    assert sanitize_filename("../../etc/passwd") == "passwd"
    assert sanitize_filename("C:\\Users\\sam\\cv final.pdf") == "cv_final.pdf"
    assert sanitize_filename("...") == "resume"


def test_is_upload_requires_named_file():
    assert is_upload(make_upload("cv.pdf", b"x"))
    assert not is_upload(make_upload("", b"x"))
    assert not is_upload("cv.pdf")
    assert not is_upload(None)
