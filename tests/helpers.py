import io

from bson import ObjectId
from gridfs.errors import NoFile


def register(client, username, password="secret-pw"):
    return client.post("/api/register", json={"username": username, "password": password})


def login(client, username, password="secret-pw"):
    return client.post("/api/login", json={"username": username, "password": password})


def auth_headers(client, username, password="secret-pw"):
    """Register and log in a user, returning Authorization headers."""
    register(client, username, password)
    token = login(client, username, password).json()["token"]
    return {"Authorization": f"Bearer {token}"}


class FakeGridOut(io.BytesIO):
    def __init__(self, filename, data, metadata):
        super().__init__(data)
        self.filename = filename
        self.metadata = metadata


class FakeGridFSBucket:
    """Stands in for gridfs.GridFSBucket with the calls the resume store makes."""

    def __init__(self):
        self.files = {}

    def upload_from_stream(self, filename, source, metadata=None):
        file_id = ObjectId()
        self.files[file_id] = (filename, bytes(source), metadata)
        return file_id

    def open_download_stream(self, file_id):
        if file_id not in self.files:
            raise NoFile(f"no file with id {file_id}")
        return FakeGridOut(*self.files[file_id])

    def delete(self, file_id):
        if file_id not in self.files:
            raise NoFile(f"no file with id {file_id}")
        del self.files[file_id]
