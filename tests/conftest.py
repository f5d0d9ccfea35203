import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app
from app.services.resume_storage import get_resume_store
from app.utils.file_upload import ResumeUpload
from tests.helpers import auth_headers


class InMemoryResumeStore:
    """Resume store test double: keeps uploads in a dict keyed by URL."""

    def __init__(self):
        self.files = {}
        self.deleted = []
        self._counter = 0

    def save(self, upload: ResumeUpload) -> str:
        self._counter += 1
        url = f"memory://resumes/{self._counter}_{upload.filename}"
        self.files[url] = upload
        return url

    def delete(self, url: str) -> None:
        self.files.pop(url, None)
        self.deleted.append(url)

    def open(self, file_id: str):
        return None

    def close(self) -> None:
        pass


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'jobboard-test.db'}",
        db_pool_size=5,
        jwt_secret_key="test-secret",
        jwt_expire_minutes=60,
        resume_storage="s3",
        s3_bucket_name="test-bucket",
        log_format="console",
        log_level="WARNING",
    )


@pytest.fixture
def resume_store():
    return InMemoryResumeStore()


@pytest.fixture
def app(settings, resume_store):
    app = create_app(settings)
    app.dependency_overrides[get_resume_store] = lambda: resume_store
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def employer(client):
    headers = auth_headers(client, "acme-hr")
    resp = client.post("/api/profile/employer", data={"companyName": "Acme", "address": "1 Main St"}, headers=headers)
    assert resp.status_code == 201
    return headers


@pytest.fixture
def seeker(client):
    headers = auth_headers(client, "sam")
    resp = client.post(
        "/api/profile/jobSeeker",
        data={"firstName": "Sam", "lastName": "Lee", "skills": "Python, SQL", "workExperience": "3 years", "email": "sam@jobmail.io"},
        headers=headers,
    )
    assert resp.status_code == 201
    return headers
