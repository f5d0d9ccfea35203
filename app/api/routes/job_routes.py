"""
Job Routes

POST /jobs                   - Post a job owned by the caller
GET  /jobs?job_title=        - List all jobs, optional title substring filter
GET  /jobs_for_user          - Jobs posted by the caller
GET  /jobs/{job_id}          - Job details (owner only)
PUT  /jobs/{job_id}          - Overwrite a job (owner only)
POST /apply-job              - Apply to a job, once per user and job
GET  /applied-jobs           - Ids of jobs the caller applied to
GET  /jobs/{job_id}/applicants - Users who applied to a job

Access rules per action live in app.api.policies.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from app.api.policies import JOB_COLUMNS, JobAction, load_job, scope_clause
from app.core.auth import get_current_user
from app.core.errors import AlreadyApplied
from app.db.postgres import Database, fetch_all, fetch_one, get_db
from app.schemas.schemas import (
    ApplicantListResponse, AppliedJobsResponse, ApplyRequest, JobEnvelope, JobListResponse,
    JobPostedResponse, JobRequest, MessageResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Jobs"])


def _job_params(job: JobRequest) -> dict:
    return {
        "job_title": job.job_title,
        "job_description": job.job_description,
        "tags": job.tags,
        "budget": job.budget,
        "duration": job.duration,
    }


@router.post("/jobs", response_model=JobPostedResponse)
def post_job(job: JobRequest, user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    """Post a new job owned by the caller."""
    with db.session() as conn:
        job_id = conn.execute(
            text("""
                INSERT INTO jobs (user_id, job_title, job_description, tags, budget, duration)
                VALUES (:user_id, :job_title, :job_description, :tags, :budget, :duration)
                RETURNING job_id
            """),
            {"user_id": user["user_id"], **_job_params(job)}
        ).scalar_one()

    logger.info("job posted", job_id=job_id, username=user["username"])
    return JobPostedResponse(message="Job posted successfully", job_id=job_id)


@router.get("/jobs", response_model=JobListResponse)
def list_jobs(
    job_title: Optional[str] = Query(None, description="Case-insensitive substring of the title"),
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """List all jobs from every employer."""
    clause, params = scope_clause(JobAction.list_all, user["user_id"])
    sql = f"SELECT {JOB_COLUMNS} FROM jobs WHERE 1 = 1{clause}"

    if job_title:
        sql += " AND LOWER(job_title) LIKE :job_title"
        params["job_title"] = f"%{job_title.lower()}%"

    sql += " ORDER BY job_id"
    with db.session() as conn:
        jobs = fetch_all(conn, sql, params)

    return {"jobs": jobs}


@router.get("/jobs_for_user", response_model=JobListResponse)
def list_my_jobs(user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    """Jobs posted by the caller."""
    clause, params = scope_clause(JobAction.list_own, user["user_id"])
    with db.session() as conn:
        jobs = fetch_all(conn, f"SELECT {JOB_COLUMNS} FROM jobs WHERE 1 = 1{clause} ORDER BY job_id", params)

    return {"jobs": jobs}


@router.get("/jobs/{job_id}", response_model=JobEnvelope)
def get_job(job_id: int, user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    with db.session() as conn:
        job = load_job(conn, JobAction.read, job_id, user["user_id"])

    return {"job": job}


@router.put("/jobs/{job_id}", response_model=MessageResponse)
def update_job(job_id: int, job: JobRequest, user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    """Overwrite every mutable field of a job the caller owns."""
    with db.session() as conn:
        load_job(conn, JobAction.update, job_id, user["user_id"])
        conn.execute(
            text("""
                UPDATE jobs SET job_title = :job_title, job_description = :job_description,
                    tags = :tags, budget = :budget, duration = :duration
                WHERE job_id = :job_id
            """),
            {"job_id": job_id, **_job_params(job)}
        )

    logger.info("job updated", job_id=job_id, username=user["username"])
    return MessageResponse(message="Job updated successfully")


@router.post("/apply-job", response_model=MessageResponse)
def apply_job(application: ApplyRequest, user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    """Apply to a job. A user can apply to a given job only once."""
    params = {"user_id": user["user_id"], "job_id": application.job_id}
    try:
        with db.session() as conn:
            load_job(conn, JobAction.apply, application.job_id, user["user_id"])

            existing = fetch_one(
                conn,
                "SELECT application_id FROM job_applications WHERE user_id = :user_id AND job_id = :job_id",
                params
            )
            if existing:
                raise AlreadyApplied()

            conn.execute(text("INSERT INTO job_applications (user_id, job_id) VALUES (:user_id, :job_id)"), params)
    except IntegrityError:
        # A concurrent duplicate hit the unique constraint
        raise AlreadyApplied() from None

    logger.info("application submitted", job_id=application.job_id, username=user["username"])
    return MessageResponse(message="Job application submitted successfully")


@router.get("/applied-jobs", response_model=AppliedJobsResponse)
def applied_jobs(user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    with db.session() as conn:
        rows = fetch_all(
            conn,
            "SELECT job_id FROM job_applications WHERE user_id = :user_id ORDER BY application_id",
            {"user_id": user["user_id"]}
        )

    return AppliedJobsResponse(applied_jobs=[r["job_id"] for r in rows])


@router.get("/jobs/{job_id}/applicants", response_model=ApplicantListResponse)
def job_applicants(job_id: int, user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    """Users who applied to a job. An unknown job has no applicants."""
    clause, params = scope_clause(JobAction.list_applicants, user["user_id"], owner_column="j.user_id")
    with db.session() as conn:
        applicants = fetch_all(
            conn,
            f"""
            SELECT u.user_id, u.username
            FROM users u
            JOIN job_applications ja ON u.user_id = ja.user_id
            JOIN jobs j ON j.job_id = ja.job_id
            WHERE ja.job_id = :job_id{clause}
            ORDER BY ja.application_id
            """,
            {"job_id": job_id, **params}
        )

    return {"applicants": applicants}
