"""
Job access policies.

Which jobs a caller may see or touch, per action. Reading or updating one job
is owner-only; its applicant list is open to any authenticated user. Routes
go through load_job/scope_clause rather than filtering on user_id themselves.
"""

from enum import Enum
from typing import Any, Dict, Tuple

from sqlalchemy.engine import Connection

from app.core.errors import NotFound
from app.db.postgres import fetch_one


class Access(str, Enum):
    authenticated = "authenticated"
    owner = "owner"


class JobAction(str, Enum):
    list_all = "list_all"
    list_own = "list_own"
    read = "read"
    update = "update"
    apply = "apply"
    list_applicants = "list_applicants"


JOB_ACCESS: Dict[JobAction, Access] = {
    JobAction.list_all: Access.authenticated,
    JobAction.list_own: Access.owner,
    JobAction.read: Access.owner,
    JobAction.update: Access.owner,
    JobAction.apply: Access.authenticated,
    JobAction.list_applicants: Access.authenticated,
}

JOB_COLUMNS = "job_id, user_id, job_title, job_description, tags, budget, duration"


def scope_clause(action: JobAction, user_id: int, owner_column: str = "user_id") -> Tuple[str, Dict[str, Any]]:
    """SQL condition (to AND onto a WHERE) restricting jobs to what the caller may access."""
    if JOB_ACCESS[action] is Access.owner:
        return f" AND {owner_column} = :scope_user_id", {"scope_user_id": user_id}
    return "", {}


def load_job(conn: Connection, action: JobAction, job_id: int, user_id: int) -> Dict[str, Any]:
    """
    Fetch a job for the given action, applying its access policy.
    A job the caller may not access is reported exactly like a missing one.
    """
    clause, params = scope_clause(action, user_id)
    job = fetch_one(
        conn,
        f"SELECT {JOB_COLUMNS} FROM jobs WHERE job_id = :job_id{clause}",
        {"job_id": job_id, **params}
    )
    if job is None:
        raise NotFound("Job not found")
    return job
