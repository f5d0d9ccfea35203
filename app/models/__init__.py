"""
Models module - domain definitions shared by routes and services.
"""
from app.models.profiles import PROFILE_SPECS, ProfileCategory, ProfileSpec, get_profile_spec

__all__ = ["PROFILE_SPECS", "ProfileCategory", "ProfileSpec", "get_profile_spec"]
