#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the database and the resume storage backend are reachable.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import get_settings
from app.db.mongodb import create_mongo_client, ping_mongo
from app.db.postgres import Database
from app.services.resume_storage import S3ResumeStore


def check_database(settings) -> bool:
    db = Database.from_settings(settings)
    try:
        return db.ping()
    finally:
        db.dispose()


def check_s3(settings) -> bool:
    store = S3ResumeStore.from_settings(settings)
    try:
        store.client.head_bucket(Bucket=settings.s3_bucket_name)
        return True
    except (BotoCoreError, ClientError) as e:
        print(f"    {e}")
        return False
    finally:
        store.close()


def check_gridfs(settings) -> bool:
    client = create_mongo_client(settings)
    try:
        return ping_mongo(client)
    finally:
        client.close()


def main():
    settings = get_settings()
    print("=" * 50)
    print("JOB BOARD - CONNECTION CHECK")
    print("=" * 50)

    results = []

    print("\n[1] Checking database...")
    print(f"    URL: {settings.sqlalchemy_url.split('@')[-1]}")
    results.append(check_database(settings))
    print("    Database: CONNECTED" if results[-1] else "    Database: FAILED")

    backend = settings.resume_storage.lower()
    print(f"\n[2] Checking resume storage ({backend})...")
    if backend == "s3":
        print(f"    Bucket: {settings.s3_bucket_name} ({settings.aws_region})")
        results.append(check_s3(settings))
    elif backend == "gridfs":
        print(f"    URI: {settings.mongodb_uri}")
        print(f"    Database: {settings.mongodb_db}")
        results.append(check_gridfs(settings))
    else:
        print(f"    Unknown backend '{settings.resume_storage}'")
        results.append(False)
    print("    Storage: CONNECTED" if results[-1] else "    Storage: FAILED")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)
    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(main())
