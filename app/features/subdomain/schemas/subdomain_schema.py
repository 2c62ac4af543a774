import enum
from typing import Optional

from pydantic import BaseModel


class SubdomainIssue(str, enum.Enum):
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    INVALID_CHARACTERS = "invalid_characters"
    TAKEN = "taken"
    RESERVED = "reserved"


class SubdomainValidation(BaseModel):
    valid: bool
    reason: Optional[SubdomainIssue] = None
    message: Optional[str] = None


class SubdomainCheckRequest(BaseModel):
    subdomain: Optional[str] = None


class SubdomainCheckResponse(BaseModel):
    valid: bool
    message: Optional[str] = None
