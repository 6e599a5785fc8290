from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import datetime
from typing import Optional

from studyapi.models.user import UserRole


class Identity(BaseModel):
    """identity provider 가 인증한 사용자 정보 (JWT claims)"""

    user_id: str = Field(..., min_length=1, max_length=64)
    email: EmailStr


class User(BaseModel):
    id: str
    email: EmailStr
    full_name: Optional[str] = None
    username: Optional[str] = None
    university: Optional[str] = None
    major: Optional[str] = None
    year_of_study: Optional[int] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    role: UserRole = UserRole.USER
    is_active: bool = True
    total_coins: int = 0
    coins_earned: int = 0
    coins_spent: int = 0
    uploaded_files_count: int = 0
    downloaded_files_count: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def is_admin(self) -> bool:
        return UserRole.is_admin(self.role)

    @property
    def display_name(self) -> str:
        return self.username or self.full_name or self.email.split("@")[0]


class UserCreate(BaseModel):
    """계정 생성 요청 - id/email 은 토큰에서 가져오고 프로필 필드만 받는다"""

    full_name: Optional[str] = Field(None, max_length=100)
    username: Optional[str] = Field(None, min_length=3, max_length=50)
    university: Optional[str] = Field(None, max_length=150)
    major: Optional[str] = Field(None, max_length=100)
    year_of_study: Optional[int] = Field(None, ge=1, le=10)

    @field_validator("username")
    @classmethod
    def username_must_be_slug(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.replace("_", "").replace(".", "").isalnum():
            raise ValueError("Username may contain letters, digits, '_' and '.' only")
        return v


class UserUpdate(BaseModel):
    full_name: Optional[str] = Field(None, max_length=100)
    username: Optional[str] = Field(None, min_length=3, max_length=50)
    university: Optional[str] = Field(None, max_length=150)
    major: Optional[str] = Field(None, max_length=100)
    year_of_study: Optional[int] = Field(None, ge=1, le=10)
    bio: Optional[str] = Field(None, max_length=1000)
    avatar_url: Optional[str] = Field(None, max_length=2048)

    @field_validator("full_name", "username")
    @classmethod
    def must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v.strip() == "":
            raise ValueError("Value cannot be empty")
        return v

    @field_validator("username")
    @classmethod
    def username_must_be_slug(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.replace("_", "").replace(".", "").isalnum():
            raise ValueError("Username may contain letters, digits, '_' and '.' only")
        return v


class PublicProfile(BaseModel):
    """다른 사용자에게 노출되는 프로필"""

    id: str
    full_name: Optional[str] = None
    username: Optional[str] = None
    university: Optional[str] = None
    major: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    total_coins: int = 0
    uploaded_files_count: int = 0
    downloaded_files_count: int = 0

    class Config:
        from_attributes = True
