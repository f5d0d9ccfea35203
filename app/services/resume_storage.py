"""
Resume Storage - external object storage for uploaded resumes.

Two backends, selected by the RESUME_STORAGE setting:
- s3      : boto3 put_object into S3_BUCKET_NAME; reference is the object URL
- gridfs  : pymongo GridFS bucket "resumes"; reference is /api/resumes/<id>

Only the reference returned by save() is persisted in the relational store.
"""

import time
from typing import Iterator, Optional, Protocol, Tuple

import boto3
import gridfs
import structlog
from bson import ObjectId
from bson.errors import InvalidId
from gridfs.errors import NoFile
from fastapi import Request
from pymongo import MongoClient

from app.core.config import Settings
from app.db.mongodb import create_mongo_client, get_mongo_db
from app.utils.file_upload import ResumeUpload

logger = structlog.get_logger(__name__)

GRIDFS_URL_PREFIX = "/api/resumes/"


class ResumeStore(Protocol):
    def save(self, upload: ResumeUpload) -> str:
        """Store the file and return its reference URL."""
        ...

    def delete(self, url: str) -> None:
        """Remove a previously stored file by reference URL."""
        ...

    def open(self, file_id: str) -> Optional[Tuple[str, str, Iterator[bytes]]]:
        """Return (filename, content_type, chunks) for a locally served file, or None."""
        ...

    def close(self) -> None:
        ...


def build_object_key(filename: str, now: Optional[float] = None) -> str:
    """Key layout: resumes/<unix millis>_<filename>"""
    millis = int((now if now is not None else time.time()) * 1000)
    return f"resumes/{millis}_{filename}"


class S3ResumeStore:
    def __init__(self, client, bucket: str, region: str):
        self.client = client
        self.bucket = bucket
        self.region = region

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ResumeStore":
        client = boto3.client(
            "s3",
            region_name=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
        )
        return cls(client, settings.s3_bucket_name, settings.aws_region)

    def url_for(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def key_for(self, url: str) -> Optional[str]:
        prefix = self.url_for("")
        return url[len(prefix):] if url.startswith(prefix) else None

    def save(self, upload: ResumeUpload) -> str:
        key = build_object_key(upload.filename)
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=upload.content,
            ContentType=upload.content_type,
        )
        logger.info("resume stored", backend="s3", key=key, size=len(upload.content))
        return self.url_for(key)

    def delete(self, url: str) -> None:
        key = self.key_for(url)
        if key is None:
            return
        self.client.delete_object(Bucket=self.bucket, Key=key)
        logger.info("resume removed", backend="s3", key=key)

    def open(self, file_id: str):
        # S3 objects are served by S3 itself
        return None

    def close(self) -> None:
        self.client.close()


class GridFSResumeStore:
    def __init__(self, client: MongoClient, bucket: gridfs.GridFSBucket):
        self.client = client
        self.bucket = bucket

    @classmethod
    def from_settings(cls, settings: Settings) -> "GridFSResumeStore":
        client = create_mongo_client(settings)
        bucket = gridfs.GridFSBucket(get_mongo_db(client, settings), bucket_name="resumes")
        return cls(client, bucket)

    def save(self, upload: ResumeUpload) -> str:
        file_id = self.bucket.upload_from_stream(
            upload.filename,
            upload.content,
            metadata={"contentType": upload.content_type},
        )
        logger.info("resume stored", backend="gridfs", file_id=str(file_id), size=len(upload.content))
        return f"{GRIDFS_URL_PREFIX}{file_id}"

    def delete(self, url: str) -> None:
        if not url.startswith(GRIDFS_URL_PREFIX):
            return
        file_id = _object_id(url[len(GRIDFS_URL_PREFIX):])
        if file_id is None:
            return
        try:
            self.bucket.delete(file_id)
        except NoFile:
            return
        logger.info("resume removed", backend="gridfs", file_id=str(file_id))

    def open(self, file_id: str):
        oid = _object_id(file_id)
        if oid is None:
            return None
        try:
            stream = self.bucket.open_download_stream(oid)
        except NoFile:
            return None
        content_type = (stream.metadata or {}).get("contentType", "application/octet-stream")
        return stream.filename, content_type, _iter_chunks(stream)

    def close(self) -> None:
        self.client.close()


def _object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def _iter_chunks(stream, chunk_size: int = 256 * 1024) -> Iterator[bytes]:
    try:
        while True:
            chunk = stream.read(chunk_size)
            if not chunk:
                break
            yield chunk
    finally:
        stream.close()


def create_resume_store(settings: Settings) -> ResumeStore:
    backend = settings.resume_storage.lower()
    if backend == "s3":
        return S3ResumeStore.from_settings(settings)
    if backend == "gridfs":
        return GridFSResumeStore.from_settings(settings)
    raise ValueError(f"Unknown RESUME_STORAGE backend '{settings.resume_storage}'")


def get_resume_store(request: Request) -> ResumeStore:
    """Dependency returning the store built by the application lifespan."""
    return request.app.state.resume_store
