"""
Table definitions.

Only used to create the schema (metadata.create_all); all reads and writes
go through parameterized text() SQL in the routes and services.
"""

from sqlalchemy import (
    Boolean, Column, DateTime, Float, ForeignKey, Integer, MetaData, String, Table, Text,
    UniqueConstraint, false, func,
)

metadata = MetaData()

users = Table(
    "users", metadata,
    Column("user_id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(255), nullable=False, unique=True),
    Column("password", String(255), nullable=False),
    Column("is_registered", Boolean, nullable=False, server_default=false()),
    Column("profile_category", String(32), nullable=True),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)

employer_profiles = Table(
    "employer_profiles", metadata,
    Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True),
    Column("company_name", String(255)),
    Column("address", Text),
)

job_seeker_profiles = Table(
    "job_seeker_profiles", metadata,
    Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True),
    Column("first_name", String(255)),
    Column("last_name", String(255)),
    Column("skills", Text),
    Column("work_experience", Text),
    Column("email", String(255)),
    Column("resume_url", Text, nullable=True),
)

jobs = Table(
    "jobs", metadata,
    Column("job_id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True),
    Column("job_title", String(255), nullable=False),
    Column("job_description", Text),
    Column("tags", Text),
    Column("budget", Float),
    Column("duration", String(255)),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)

job_applications = Table(
    "job_applications", metadata,
    Column("application_id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
    Column("job_id", Integer, ForeignKey("jobs.job_id", ondelete="CASCADE"), nullable=False, index=True),
    Column("applied_at", DateTime, nullable=False, server_default=func.current_timestamp()),
    UniqueConstraint("user_id", "job_id", name="uq_job_applications_user_job"),
)
