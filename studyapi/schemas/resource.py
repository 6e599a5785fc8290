from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ResourceSort(str, Enum):
    NEWEST = "newest"
    POPULAR = "popular"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"


class ResourceCreate(BaseModel):
    """자료 업로드 요청 - 파일은 이미 object storage 에 올라가 있어야 함"""

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    subject: Optional[str] = Field(None, max_length=100)
    course_code: Optional[str] = Field(None, max_length=50)
    file_path: str = Field(..., min_length=1, description="object storage 경로 또는 URL")
    file_type: str = Field(..., min_length=1, max_length=20)
    file_size: int = Field(..., gt=0, description="바이트 단위 파일 크기")
    coin_price: int = Field(0, ge=0, description="다운로드 가격 (코인)")

    @field_validator("file_type")
    @classmethod
    def normalize_file_type(cls, v: str) -> str:
        return v.strip().lower().lstrip(".")

    @field_validator("title")
    @classmethod
    def title_must_not_be_blank(cls, v: str) -> str:
        if v.strip() == "":
            raise ValueError("Title cannot be empty")
        return v.strip()


class Resource(BaseModel):
    id: int
    owner_id: str
    title: str
    description: Optional[str] = None
    subject: Optional[str] = None
    course_code: Optional[str] = None
    file_path: str
    file_type: str
    file_size: int
    coin_price: int
    download_count: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ResourceFilters(BaseModel):
    """자료 목록 조회 조건"""

    search: Optional[str] = None
    subject: Optional[str] = None
    file_type: Optional[str] = None
    owner_id: Optional[str] = None
    max_price: Optional[int] = Field(None, ge=0)
    sort: ResourceSort = ResourceSort.NEWEST
    limit: int = Field(20, ge=1, le=100)
    offset: int = Field(0, ge=0)


class UploadResult(BaseModel):
    """업로드 결과 - 생성된 자료와 보상 내역"""

    resource: Resource
    coins_awarded: int
    balance_after: int
    new_achievements: list[str] = Field(default_factory=list)
