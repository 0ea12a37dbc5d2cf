# app/schemas/profile_schema.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Dict, Optional, Union
from datetime import date, datetime
import re

# 寬鬆的 URL 格式 (允許省略 http://，例如 github.com/neo)
URL_PATTERN = re.compile(r"^(https?://)?([\w-]+\.)+[a-z]{2,}(:\d+)?(/\S*)?$", re.IGNORECASE)

SOCIAL_KEYS = ("youtube", "twitter", "facebook", "linkedin", "instagram")


def _require_text(value, field_name: str):
    """必填字串欄位：空白字串視同未填"""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"{field_name} field is required")
    return value


def _blank_to_none(value):
    # 前端表單常把未填的日期送成 ""
    if isinstance(value, str) and not value.strip():
        return None
    return value


# --- Profile 建立 / 更新 (Upsert) ---
class ProfileUpsert(BaseModel):
    """
    前端送來的欄位袋 (field bag)。
    只有「有被傳入」的欄位會參與合併 (Service 使用 exclude_unset=True)。
    """
    handle: Optional[str] = None
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    status: str
    skills: Union[str, List[str], None] = None # 逗號分隔字串 (或已拆好的列表)
    bio: Optional[str] = None
    githubusername: Optional[str] = None

    # 社群連結平鋪在最外層
    youtube: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v):
        return _require_text(v, "status")

    @field_validator("handle")
    @classmethod
    def validate_handle(cls, v: Optional[str]) -> Optional[str]:
        # 只有空白的 handle 視同未傳
        if v is None or not v.strip():
            return None
        if not 2 <= len(v.strip()) <= 40:
            raise ValueError("Handle needs to be between 2 and 40 characters")
        return v

    @field_validator("website", *SOCIAL_KEYS)
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        if v and v.strip() and not URL_PATTERN.match(v.strip()):
            raise ValueError("Not a valid URL")
        return v


# --- Experience ---
class ExperienceCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    company: str
    location: Optional[str] = None
    from_date: date = Field(..., validation_alias="from")
    to_date: Optional[date] = Field(None, validation_alias="to")
    current: bool = False
    description: Optional[str] = None

    @field_validator("title", "company", mode="before")
    @classmethod
    def validate_required(cls, v, info):
        return _require_text(v, info.field_name)

    @field_validator("to_date", mode="before")
    @classmethod
    def empty_to_date(cls, v):
        return _blank_to_none(v)


class ExperienceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    company: str
    location: Optional[str] = None
    from_date: date = Field(serialization_alias="from")
    to_date: Optional[date] = Field(None, serialization_alias="to")
    current: bool = False
    description: Optional[str] = None


# --- Education ---
class EducationCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    school: str
    degree: str
    fieldofstudy: str
    from_date: date = Field(..., validation_alias="from")
    to_date: Optional[date] = Field(None, validation_alias="to")
    current: bool = False
    description: Optional[str] = None

    @field_validator("school", "degree", "fieldofstudy", mode="before")
    @classmethod
    def validate_required(cls, v, info):
        return _require_text(v, info.field_name)

    @field_validator("to_date", mode="before")
    @classmethod
    def empty_to_date(cls, v):
        return _blank_to_none(v)


class EducationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school: str
    degree: str
    fieldofstudy: str
    from_date: date = Field(serialization_alias="from")
    to_date: Optional[date] = Field(None, serialization_alias="to")
    current: bool = False
    description: Optional[str] = None


# --- Profile 回傳格式 ---
class ProfileUserOut(BaseModel):
    """只公開擁有者的名字與頭像"""
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    name: str
    avatar: Optional[str] = None


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    profile_id: str
    user: ProfileUserOut # (重要) 巢狀 Pydantic，對應 Profile.user relationship
    handle: str
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    status: str
    skills: List[str] = []
    bio: Optional[str] = None
    githubusername: Optional[str] = None
    social: Dict[str, str] = {}
    experience: List[ExperienceOut] = []
    education: List[EducationOut] = []
    created_at: Optional[datetime] = None


class MessageOut(BaseModel):
    msg: str
