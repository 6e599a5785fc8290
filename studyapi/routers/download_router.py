from typing import List

from fastapi import APIRouter, Depends, Query

from studyapi.deps import get_current_active_user, get_download_service
from studyapi.schemas.download import Download
from studyapi.schemas.pagination import PaginationLimits
from studyapi.schemas.user import User
from studyapi.services.download_service import DownloadService

router = APIRouter(prefix="/downloads", tags=["downloads"])


@router.get("/me", response_model=List[Download])
async def list_my_downloads(
    limit: int = Query(
        PaginationLimits.DOWNLOADS["default"],
        ge=PaginationLimits.DOWNLOADS["min"],
        le=PaginationLimits.DOWNLOADS["max"],
    ),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_active_user),
    download_service: DownloadService = Depends(get_download_service),
) -> List[Download]:
    """내 다운로드 내역 (최신순)"""
    return download_service.list_user_downloads(current_user.id, limit=limit, offset=offset)
