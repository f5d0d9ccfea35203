from unittest.mock import Mock

import boto3
import pytest
from bson import ObjectId
from botocore.stub import ANY, Stubber

from app.core.config import Settings
from app.services.resume_storage import (
    GridFSResumeStore, S3ResumeStore, build_object_key, create_resume_store,
)
from app.utils.file_upload import ResumeUpload
from tests.helpers import FakeGridFSBucket


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="eu-west-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def store(s3_client):
    return S3ResumeStore(s3_client, "cv-bucket", "eu-west-1")


def test_object_key_uses_millisecond_prefix():
    assert build_object_key("cv.pdf", now=1700000000.123) == "resumes/1700000000123_cv.pdf"


def test_url_and_key_are_inverse(store):
    url = store.url_for("resumes/1_cv.pdf")
    assert url == "https://cv-bucket.s3.eu-west-1.amazonaws.com/resumes/1_cv.pdf"
    assert store.key_for(url) == "resumes/1_cv.pdf"
    assert store.key_for("https://elsewhere.example.org/cv.pdf") is None


def test_save_puts_object_and_returns_url(store, s3_client):
    upload = ResumeUpload(filename="cv.pdf", content=b"%PDF", content_type="application/pdf")

    with Stubber(s3_client) as stub:
        stub.add_response(
            "put_object",
            {},
            {"Bucket": "cv-bucket", "Key": ANY, "Body": b"%PDF", "ContentType": "application/pdf"},
        )
        url = store.save(upload)
        stub.assert_no_pending_responses()

    assert url.startswith("https://cv-bucket.s3.eu-west-1.amazonaws.com/resumes/")
    assert url.endswith("_cv.pdf")


def test_delete_removes_object_by_url(store, s3_client):
    with Stubber(s3_client) as stub:
        stub.add_response("delete_object", {}, {"Bucket": "cv-bucket", "Key": "resumes/1_cv.pdf"})
        store.delete(store.url_for("resumes/1_cv.pdf"))
        stub.assert_no_pending_responses()


def test_delete_ignores_foreign_url(store, s3_client):
    with Stubber(s3_client) as stub:
        store.delete("https://elsewhere.example.org/cv.pdf")
        stub.assert_no_pending_responses()


def test_s3_store_does_not_serve_files(store):
    assert store.open("anything") is None


def test_unknown_backend_is_rejected():
    settings = Settings(_env_file=None, resume_storage="ftp")
    with pytest.raises(ValueError, match="ftp"):
        create_resume_store(settings)


# --- GridFS backend ---

@pytest.fixture
def bucket():
    return FakeGridFSBucket()


@pytest.fixture
def gridfs_store(bucket):
    return GridFSResumeStore(Mock(), bucket)


def test_gridfs_save_returns_download_url(gridfs_store, bucket):
    url = gridfs_store.save(ResumeUpload(filename="cv.pdf", content=b"%PDF", content_type="application/pdf"))

    assert url.startswith("/api/resumes/")
    file_id = ObjectId(url.rsplit("/", 1)[1])
    assert bucket.files[file_id] == ("cv.pdf", b"%PDF", {"contentType": "application/pdf"})


def test_gridfs_open_streams_file_in_chunks(gridfs_store, bucket):
    content = b"x" * (256 * 1024) + b"tail"
    url = gridfs_store.save(ResumeUpload(filename="cv.txt", content=content, content_type="text/plain"))

    filename, content_type, chunks = gridfs_store.open(url.rsplit("/", 1)[1])
    parts = list(chunks)

    assert (filename, content_type) == ("cv.txt", "text/plain")
    assert [len(p) for p in parts] == [256 * 1024, 4]
    assert b"".join(parts) == content


def test_gridfs_open_unknown_or_malformed_id(gridfs_store):
    assert gridfs_store.open(str(ObjectId())) is None
    assert gridfs_store.open("not-an-object-id") is None


def test_gridfs_delete(gridfs_store, bucket):
    url = gridfs_store.save(ResumeUpload(filename="cv.pdf", content=b"%PDF", content_type="application/pdf"))
    gridfs_store.delete(url)
    assert bucket.files == {}

    # already gone, foreign or malformed references are ignored
    gridfs_store.delete(url)
    gridfs_store.delete("https://cv-bucket.s3.eu-west-1.amazonaws.com/resumes/1_cv.pdf")
    gridfs_store.delete("/api/resumes/not-an-object-id")


def test_gridfs_close_closes_client(bucket):
    client = Mock()
    GridFSResumeStore(client, bucket).close()
    client.close.assert_called_once_with()
