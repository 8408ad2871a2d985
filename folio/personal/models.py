"""
Personal portfolio data models.
"""
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

COLLECTION_FIELDS = ("experiences", "education", "projects", "certificates")
SOCIAL_FIELDS = ("github", "linkedin", "twitter", "email")


class Record(BaseModel):
    """Base for entries of an identified collection."""
    model_config = ConfigDict(populate_by_name=True)

    id: int


class Experience(Record):
    """Work experience entry."""
    title: str
    company: str
    date: str
    description: str = ""


class Education(Record):
    """Education entry."""
    degree: str
    institution: str
    date: str
    description: str = ""


class Project(Record):
    """Portfolio project."""
    title: str
    description: str = ""
    image: str = ""
    tags: List[str] = []
    live_url: str = Field(default="#", alias="liveUrl")
    github_url: str = Field(default="#", alias="githubUrl")


class Certificate(Record):
    """Certificate or credential."""
    title: str
    issuer: str = ""
    date: str = ""
    credential_url: str = Field(default="#", alias="credentialUrl")
    image: str = ""


class Skill(BaseModel):
    """Single skill; `icon` is a key into the icon registry."""
    name: str
    icon: str
    color: str


class SkillCategory(BaseModel):
    """Named group of skills."""
    title: str
    skills: List[Skill] = []


class Socials(BaseModel):
    """Social links."""
    github: str = ""
    linkedin: str = ""
    twitter: str = ""
    email: str = ""


class PortfolioModel(BaseModel):
    """Complete portfolio content.

    Attribute names are snake_case; the persisted document uses the
    camelCase aliases.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str
    tagline: str
    about: str
    resume_url: str = Field(alias="resumeUrl")
    hero_image: str = Field(alias="heroImage")
    socials: Socials
    experiences: List[Experience]
    education: List[Education]
    projects: List[Project]
    certificates: List[Certificate]
    skills: List[SkillCategory]

    @field_validator(*COLLECTION_FIELDS)
    @classmethod
    def _unique_ids(cls, records):
        seen = set()
        for record in records:
            if record.id in seen:
                raise ValueError(f"duplicate id {record.id}")
            seen.add(record.id)
        return records

    @field_validator("skills")
    @classmethod
    def _unique_titles(cls, categories):
        titles = [category.title for category in categories]
        if len(titles) != len(set(titles)):
            raise ValueError("skill category titles must be unique")
        return categories

    def to_document(self) -> Dict:
        """Serialize to the persisted JSON-compatible shape."""
        return self.model_dump(mode="json", by_alias=True)


RECORD_TYPES = {
    "experiences": Experience,
    "education": Education,
    "projects": Project,
    "certificates": Certificate,
}


def resolve_field(model_type, field: str) -> str:
    """Map an attribute name or alias to the attribute name.

    Raises:
        KeyError: if the model has no such field
    """
    if field in model_type.model_fields:
        return field
    for name, info in model_type.model_fields.items():
        if info.alias == field:
            return name
    raise KeyError(f"{model_type.__name__} has no field {field!r}")
