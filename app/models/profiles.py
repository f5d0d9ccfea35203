"""
Profile categories.

A registered user is either an employer or a job seeker. Each category is
declared once here (table, API field -> column mapping, whether it carries a
resume) and every profile query is generated from that declaration.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, EmailStr
from pydantic.alias_generators import to_camel

from app.core.errors import BadRequest


class ProfileCategory(str, Enum):
    employer = "employer"
    job_seeker = "jobSeeker"

    @classmethod
    def parse(cls, value: str) -> "ProfileCategory":
        try:
            return cls(value)
        except ValueError:
            raise BadRequest(f"Unknown profile type '{value}'") from None


class ProfileForm(BaseModel):
    """Base for profile form payloads; fields are camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EmployerProfileForm(ProfileForm):
    company_name: Optional[str] = None
    address: Optional[str] = None


class JobSeekerProfileForm(ProfileForm):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    skills: Optional[str] = None
    work_experience: Optional[str] = None
    email: Optional[EmailStr] = None


@dataclass(frozen=True)
class ProfileSpec:
    category: ProfileCategory
    table: str
    # (attribute on the form model, column in the table)
    fields: Tuple[Tuple[str, str], ...]
    form: Type[ProfileForm]
    resume_column: Optional[str] = None

    @property
    def accepts_resume(self) -> bool:
        return self.resume_column is not None

    @property
    def columns(self) -> Tuple[str, ...]:
        return tuple(column for _, column in self.fields)

    def to_api(self, row: Dict) -> Dict:
        """Shape a profile row with camelCase keys."""
        details = {to_camel(attr): row.get(column) for attr, column in self.fields}
        if self.resume_column:
            details["resumeUrl"] = row.get(self.resume_column)
        return details


PROFILE_SPECS: Dict[ProfileCategory, ProfileSpec] = {
    ProfileCategory.employer: ProfileSpec(
        category=ProfileCategory.employer,
        table="employer_profiles",
        fields=(("company_name", "company_name"), ("address", "address")),
        form=EmployerProfileForm,
    ),
    ProfileCategory.job_seeker: ProfileSpec(
        category=ProfileCategory.job_seeker,
        table="job_seeker_profiles",
        fields=(
            ("first_name", "first_name"),
            ("last_name", "last_name"),
            ("skills", "skills"),
            ("work_experience", "work_experience"),
            ("email", "email"),
        ),
        form=JobSeekerProfileForm,
        resume_column="resume_url",
    ),
}


def get_profile_spec(category: ProfileCategory) -> ProfileSpec:
    return PROFILE_SPECS[category]
