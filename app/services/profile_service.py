"""
Profile Service - category-generic profile SQL.

All statements are built from a ProfileSpec's column list, never from user
input, and every value is passed as a bound parameter.
"""

from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError
from sqlalchemy import text
from sqlalchemy.engine import Connection

from app.core.errors import BadRequest
from app.db.postgres import fetch_one
from app.models.profiles import ProfileForm, ProfileSpec


def parse_profile_form(spec: ProfileSpec, form: Mapping[str, Any]) -> ProfileForm:
    """
    Validate submitted form fields against the category's form model.
    Empty strings count as absent. Unknown keys (and the file field) are ignored.
    """
    data = {}
    for key, value in form.items():
        if isinstance(value, str):
            value = value.strip()
            if value:
                data[key] = value
    try:
        return spec.form.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(loc) for loc in first["loc"])
        raise BadRequest(f"Invalid value for '{field}': {first['msg']}") from None


def _values(spec: ProfileSpec, form: ProfileForm) -> Dict[str, Any]:
    values = {}
    for attr, column in spec.fields:
        value = getattr(form, attr)
        values[column] = str(value) if value is not None else None
    return values


def insert_profile(
    conn: Connection, spec: ProfileSpec, user_id: int, form: ProfileForm,
    resume_url: Optional[str] = None,
) -> None:
    """Insert the profile row and flag the user as registered in this category."""
    params = _values(spec, form)
    columns = list(spec.columns)
    if spec.accepts_resume:
        columns.append(spec.resume_column)
        params[spec.resume_column] = resume_url
    params["user_id"] = user_id

    conn.execute(
        text(f"""
            INSERT INTO {spec.table} (user_id, {', '.join(columns)})
            VALUES (:user_id, {', '.join(':' + c for c in columns)})
        """),
        params
    )
    conn.execute(
        text("UPDATE users SET is_registered = :registered, profile_category = :category WHERE user_id = :user_id"),
        {"registered": True, "category": spec.category.value, "user_id": user_id}
    )


def update_profile(conn: Connection, spec: ProfileSpec, user_id: int, form: ProfileForm) -> bool:
    """Overwrite every field of the category. Returns False if no profile row exists."""
    params = _values(spec, form)
    params["user_id"] = user_id
    assignments = ", ".join(f"{c} = :{c}" for c in spec.columns)
    result = conn.execute(
        text(f"UPDATE {spec.table} SET {assignments} WHERE user_id = :user_id"),
        params
    )
    return result.rowcount > 0


def set_resume_url(conn: Connection, spec: ProfileSpec, user_id: int, resume_url: str) -> Optional[str]:
    """Point the profile at a new resume and return the URL it pointed at before."""
    previous = fetch_one(
        conn,
        f"SELECT {spec.resume_column} AS url FROM {spec.table} WHERE user_id = :user_id",
        {"user_id": user_id}
    )
    conn.execute(
        text(f"UPDATE {spec.table} SET {spec.resume_column} = :url WHERE user_id = :user_id"),
        {"url": resume_url, "user_id": user_id}
    )
    return previous["url"] if previous else None


def get_profile(conn: Connection, spec: ProfileSpec, user_id: int) -> Optional[Dict[str, Any]]:
    """Return the profile row shaped for the API, or None."""
    columns = list(spec.columns)
    if spec.accepts_resume:
        columns.append(spec.resume_column)
    row = fetch_one(
        conn,
        f"SELECT {', '.join(columns)} FROM {spec.table} WHERE user_id = :user_id",
        {"user_id": user_id}
    )
    return spec.to_api(row) if row is not None else None

