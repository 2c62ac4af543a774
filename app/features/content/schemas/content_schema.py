from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.features.auth.schemas.auth_schema import CamelModel


class ContentGenerationRequest(CamelModel):
    content_type: str = Field(min_length=1)
    business_type: str = Field(min_length=1)
    tone: str
    length: str
    details: str = ""
    language: str = "th"


class GeneratedContent(CamelModel):
    title: str
    content: str


class ContentSaveRequest(CamelModel):
    title: str = Field(min_length=1)
    content_type: str = Field(min_length=1)
    content: str = Field(min_length=1)
    prompt: str
    language: str = "th"


class ContentCreate(BaseModel):
    user_id: int
    title: str
    content_type: str
    content: str
    prompt: str
    language: Optional[str] = "th"


class ContentPatch(CamelModel):
    """Fields left out of the request body keep their stored value."""

    title: Optional[str] = Field(default=None, min_length=1)
    content_type: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = Field(default=None, min_length=1)
    prompt: Optional[str] = None
    language: Optional[str] = None


class ContentOut(CamelModel):
    id: int
    user_id: int
    title: str
    content_type: str
    content: str
    prompt: str
    language: Optional[str] = None
    created_at: datetime
