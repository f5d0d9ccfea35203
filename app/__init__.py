"""
Job Board API
Registration, employer / job seeker profiles, job postings and applications.

Architecture:
- PostgreSQL: users, profiles, jobs, applications (raw parameterized SQL)
- S3 or MongoDB GridFS: uploaded resume files, referenced by URL
"""

__version__ = "1.0.0"
