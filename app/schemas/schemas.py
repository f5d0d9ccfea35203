"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Request bodies use the camelCase keys the frontend sends; job rows are
returned with their column names.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)

class LoginRequest(BaseModel):
    username: str
    password: str

class TokenResponse(BaseModel):
    token: str


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class JobSeekerSummary(BaseModel):
    user_id: int
    username: str
    email: Optional[str] = None

class JobSeekerListResponse(CamelModel):
    job_seekers: List[JobSeekerSummary]

class JobSeekerDetails(CamelModel):
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    skills: Optional[str] = None
    work_experience: Optional[str] = None
    resume_url: Optional[str] = None

class JobSeekerDetailsResponse(CamelModel):
    job_seeker_details: JobSeekerDetails


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobRequest(CamelModel):
    job_title: str = Field(..., min_length=1, max_length=255)
    job_description: Optional[str] = None
    tags: Optional[str] = None
    budget: Optional[float] = Field(None, ge=0)
    duration: Optional[str] = None

class JobResponse(BaseModel):
    job_id: int
    user_id: int
    job_title: str
    job_description: Optional[str] = None
    tags: Optional[str] = None
    budget: Optional[float] = None
    duration: Optional[str] = None

class JobEnvelope(BaseModel):
    job: JobResponse

class JobListResponse(BaseModel):
    jobs: List[JobResponse]

class JobPostedResponse(CamelModel):
    message: str
    job_id: int


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplyRequest(CamelModel):
    job_id: int

class AppliedJobsResponse(CamelModel):
    applied_jobs: List[int]

class Applicant(BaseModel):
    user_id: int
    username: str

class ApplicantListResponse(BaseModel):
    applicants: List[Applicant]


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
