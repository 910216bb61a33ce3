from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    password: str = Field(..., min_length=1, max_length=128)


class UserLogin(BaseModel):
    username: str
    password: str


class UserResponse(BaseModel):
    id: int
    username: str
    require_approval: bool
    custom_domain: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileResponse(BaseModel):
    custom_css: str = ""
    custom_html: str = ""


class ProfileUpdate(BaseModel):
    custom_css: Optional[str] = None
    custom_html: Optional[str] = None


class ModerationSettings(BaseModel):
    require_approval: bool
