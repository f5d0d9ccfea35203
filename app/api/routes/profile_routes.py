"""
Profile Routes

GET  /user-details        - Registration flag and profile of the caller
POST /profile/{type}      - Create employer or jobSeeker profile (form data, optional "resume" file)
POST /update-user         - Overwrite the caller's profile fields, optionally replace the resume
GET  /resumes/{file_id}   - Download a resume kept in GridFS
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.exc import IntegrityError
from starlette.concurrency import run_in_threadpool

from app.core.auth import get_current_identity, get_current_user
from app.core.config import Settings, get_app_settings
from app.core.errors import Conflict, NotFound
from app.db.postgres import Database, fetch_one, get_db
from app.models.profiles import ProfileCategory, ProfileForm, ProfileSpec, get_profile_spec
from app.schemas.schemas import MessageResponse
from app.services import profile_service
from app.services.resume_storage import ResumeStore, get_resume_store
from app.utils.file_upload import ResumeUpload, is_upload, read_resume_upload

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Profiles"])

RESUME_FIELD = "resume"


@router.get("/user-details")
def get_user_details(user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    """Registration status and, when registered, the profile joined with username."""
    if not user["is_registered"] or not user["profile_category"]:
        return {"isRegistered": False}

    spec = get_profile_spec(ProfileCategory(user["profile_category"]))
    with db.session() as conn:
        details = profile_service.get_profile(conn, spec, user["user_id"])

    if details is not None:
        details["username"] = user["username"]
        details["profileType"] = spec.category.value

    return {"isRegistered": True, "userDetails": details}


@router.post("/profile/{profile_type}", response_model=MessageResponse, status_code=201)
async def create_profile(
    profile_type: str,
    request: Request,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
    store: ResumeStore = Depends(get_resume_store),
    settings: Settings = Depends(get_app_settings),
):
    """
    Create the caller's profile.

    The resume (job seekers only) is uploaded first; the profile insert and
    the users row update then run in one transaction. If that transaction
    fails the uploaded file is removed again.
    """
    spec = get_profile_spec(ProfileCategory.parse(profile_type))
    if user["is_registered"]:
        raise Conflict("Profile already exists")

    async with request.form() as form:
        data = profile_service.parse_profile_form(spec, form)
        upload = await _read_resume(spec, form.get(RESUME_FIELD), settings)

    resume_url = await run_in_threadpool(store.save, upload) if upload else None

    try:
        await run_in_threadpool(_insert_profile, db, spec, user["user_id"], data, resume_url)
    except Exception:
        if resume_url:
            await run_in_threadpool(_discard_resume, store, resume_url)
        raise

    logger.info("profile created", username=user["username"], category=spec.category.value)
    return MessageResponse(message="Profile created and user updated successfully")


@router.post("/update-user", response_model=MessageResponse)
async def update_user(
    request: Request,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
    store: ResumeStore = Depends(get_resume_store),
    settings: Settings = Depends(get_app_settings),
):
    """Overwrite every profile field; the resume changes only if a new file is sent."""
    if not user["profile_category"]:
        raise NotFound("Profile not found")

    spec = get_profile_spec(ProfileCategory(user["profile_category"]))
    async with request.form() as form:
        data = profile_service.parse_profile_form(spec, form)
        upload = await _read_resume(spec, form.get(RESUME_FIELD), settings)

    resume_url = await run_in_threadpool(store.save, upload) if upload else None

    try:
        replaced_url = await run_in_threadpool(_update_profile, db, spec, user["user_id"], data, resume_url)
    except Exception:
        if resume_url:
            await run_in_threadpool(_discard_resume, store, resume_url)
        raise

    if replaced_url and replaced_url != resume_url:
        await run_in_threadpool(_discard_resume, store, replaced_url)

    logger.info("profile updated", username=user["username"], resume_replaced=resume_url is not None)
    return MessageResponse(message="User details updated successfully")


@router.get("/resumes/{file_id}")
def download_resume(
    file_id: str,
    identity: dict = Depends(get_current_identity),
    store: ResumeStore = Depends(get_resume_store),
):
    """Stream a resume stored in GridFS. S3 resumes are fetched from their URL."""
    opened = store.open(file_id)
    if opened is None:
        raise NotFound("Resume not found")

    filename, content_type, chunks = opened
    return StreamingResponse(
        chunks,
        media_type=content_type,
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )


async def _read_resume(spec: ProfileSpec, value, settings: Settings) -> Optional[ResumeUpload]:
    # Categories without a resume column ignore any attached file
    if not spec.accepts_resume or not is_upload(value):
        return None
    return await read_resume_upload(value, settings.max_resume_size_mb)


def _insert_profile(db: Database, spec: ProfileSpec, user_id: int, data: ProfileForm, resume_url: Optional[str]) -> None:
    try:
        with db.session() as conn:
            row = fetch_one(conn, "SELECT is_registered FROM users WHERE user_id = :id", {"id": user_id})
            if row and row["is_registered"]:
                raise Conflict("Profile already exists")
            profile_service.insert_profile(conn, spec, user_id, data, resume_url)
    except IntegrityError:
        raise Conflict("Profile already exists") from None


def _update_profile(
    db: Database, spec: ProfileSpec, user_id: int, data: ProfileForm, resume_url: Optional[str],
) -> Optional[str]:
    """Returns the resume URL that the new one replaced, if any."""
    replaced_url = None
    with db.session() as conn:
        if not profile_service.update_profile(conn, spec, user_id, data):
            raise NotFound("Profile not found")
        if resume_url:
            replaced_url = profile_service.set_resume_url(conn, spec, user_id, resume_url)
    return replaced_url


def _discard_resume(store: ResumeStore, resume_url: str) -> None:
    """Best-effort removal of a stored resume that no profile references any more."""
    try:
        store.delete(resume_url)
    except Exception:
        logger.exception("failed to remove unreferenced resume", resume_url=resume_url)
