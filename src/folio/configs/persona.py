from pydantic import BaseModel, Field


class PersonaConfig(BaseModel):
    """Site owner persona used when the stored profile is incomplete."""

    name: str = Field(
        default="the site owner",
        description="Name the assistant speaks as when no profile is loaded",
    )
    title: str = Field(
        default="professional full-stack developer",
        description="Role the owner is introduced with in the system prompt",
    )
