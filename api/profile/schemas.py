from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ProfileRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    handle: str | None = Field(default=None, description="Unique handle used in public profile URLs")
    company: str | None = None
    website: str | None = None
    location: str | None = None
    bio: str | None = None
    status: str | None = Field(default=None, description="Professional status, e.g. 'Developer'")
    githubusername: str | None = None
    skills: str | list[str] | None = Field(default=None, description="Comma separated list of skills")
    youtube: str | None = None
    twitter: str | None = None
    facebook: str | None = None
    linkedin: str | None = None
    instagram: str | None = None


class ExperienceRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: str | None = None
    company: str | None = None
    location: str | None = None
    from_: str | None = Field(default=None, alias="from", description="Start date (ISO 8601)")
    to: str | None = Field(default=None, description="End date (ISO 8601)")
    current: bool = False
    description: str | None = None


class EducationRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    school: str | None = None
    degree: str | None = None
    fieldofstudy: str | None = None
    from_: str | None = Field(default=None, alias="from", description="Start date (ISO 8601)")
    to: str | None = Field(default=None, description="End date (ISO 8601)")
    current: bool = False
    description: str | None = None


class ExperienceEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    company: str
    location: str | None = None
    from_: datetime = Field(alias="from")
    to: datetime | None = None
    current: bool = False
    description: str | None = None


class EducationEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    school: str
    degree: str
    fieldofstudy: str
    from_: datetime = Field(alias="from")
    to: datetime | None = None
    current: bool = False
    description: str | None = None


class ProfileOwner(BaseModel):
    id: str
    name: str = ""
    avatar: str | None = None


class ProfileResponse(BaseModel):
    id: str
    user: ProfileOwner
    handle: str
    company: str | None = None
    website: str | None = None
    location: str | None = None
    bio: str | None = None
    status: str | None = None
    githubusername: str | None = None
    skills: list[str] = Field(default_factory=list)
    social: dict[str, str] = Field(default_factory=dict)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DeleteResponse(BaseModel):
    success: bool
