"""
Pydantic models for stored candidate profiles.

The file format mirrors the ``POST /candidates`` body, so a payload that
was sent once can be saved and loaded again.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EducationProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    institution: str = ""
    title: str = ""
    start_date: Optional[date] = Field(default=None, alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")


class WorkExperienceProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    company: str = ""
    position: str = ""
    start_date: Optional[date] = Field(default=None, alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")


class CandidateProfile(BaseModel):
    """Complete candidate record as kept on disk."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    email: str = ""
    phone: Optional[str] = Field(default=None, max_length=30)
    address: Optional[str] = None
    educations: List[EducationProfile] = Field(default_factory=list)
    work_experiences: List[WorkExperienceProfile] = Field(
        default_factory=list, alias="workExperiences"
    )
