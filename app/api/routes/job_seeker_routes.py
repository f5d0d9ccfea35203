"""
Job Seeker Routes

GET /job-seekers?skills=     - Directory of job seekers, optional skills substring filter
GET /job-seeker/{username}   - Full profile of one job seeker
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.auth import get_current_identity
from app.core.errors import NotFound
from app.db.postgres import Database, fetch_all, fetch_one, get_db
from app.models.profiles import ProfileCategory
from app.schemas.schemas import (
    JobSeekerDetails, JobSeekerDetailsResponse, JobSeekerListResponse, JobSeekerSummary,
)

router = APIRouter(tags=["Job Seekers"])


@router.get("/job-seekers", response_model=JobSeekerListResponse)
def list_job_seekers(
    skills: Optional[str] = Query(None, description="Case-insensitive substring of the skills text"),
    identity: dict = Depends(get_current_identity),
    db: Database = Depends(get_db),
):
    """List job seekers that have a profile."""
    sql = """
        SELECT u.user_id, u.username, jsp.email
        FROM users u
        JOIN job_seeker_profiles jsp ON u.user_id = jsp.user_id
        WHERE u.profile_category = :category
    """
    params = {"category": ProfileCategory.job_seeker.value}

    if skills:
        sql += " AND LOWER(jsp.skills) LIKE :skills"
        params["skills"] = f"%{skills.lower()}%"

    sql += " ORDER BY u.user_id"
    with db.session() as conn:
        rows = fetch_all(conn, sql, params)

    return JobSeekerListResponse(job_seekers=[JobSeekerSummary(**r) for r in rows])


@router.get("/job-seeker/{username}", response_model=JobSeekerDetailsResponse)
def get_job_seeker(username: str, identity: dict = Depends(get_current_identity), db: Database = Depends(get_db)):
    with db.session() as conn:
        row = fetch_one(
            conn,
            """
            SELECT u.username, jsp.first_name, jsp.last_name, jsp.email, jsp.skills,
                   jsp.work_experience, jsp.resume_url
            FROM users u
            JOIN job_seeker_profiles jsp ON u.user_id = jsp.user_id
            WHERE u.username = :username AND u.profile_category = :category
            """,
            {"username": username, "category": ProfileCategory.job_seeker.value}
        )

    if not row:
        raise NotFound("Job seeker not found")

    return JobSeekerDetailsResponse(job_seeker_details=JobSeekerDetails(**row))
