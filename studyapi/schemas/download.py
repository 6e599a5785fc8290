from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Download(BaseModel):
    id: int
    user_id: str
    resource_id: int
    coins_spent: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DownloadResult(BaseModel):
    """다운로드 정산 결과"""

    download: Download
    file_path: str
    coins_spent: int
    balance_after: int
    new_achievements: list[str] = Field(default_factory=list)
