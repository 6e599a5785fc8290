"""
학습 자료 API 라우터

- POST /resources: 자료 업로드 (업로드 보상 지급)
- GET /resources: 자료 목록/검색
- GET /resources/{resource_id}: 자료 상세
- POST /resources/{resource_id}/download: 다운로드 (코인 결제)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from studyapi.core.exceptions import NotFoundError
from studyapi.deps import (
    get_current_active_user,
    get_download_service,
    get_resource_service,
)
from studyapi.schemas.download import DownloadResult
from studyapi.schemas.pagination import DirectPaginatedResponse, PaginationLimits
from studyapi.schemas.resource import (
    Resource,
    ResourceCreate,
    ResourceFilters,
    ResourceSort,
    UploadResult,
)
from studyapi.schemas.user import User
from studyapi.services.download_service import DownloadService
from studyapi.services.resource_service import ResourceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resources", tags=["resources"])


@router.post("", response_model=UploadResult, status_code=status.HTTP_201_CREATED)
async def upload_resource(
    payload: ResourceCreate,
    current_user: User = Depends(get_current_active_user),
    resource_service: ResourceService = Depends(get_resource_service),
) -> UploadResult:
    """
    자료 업로드

    파일은 클라이언트가 object storage 에 먼저 올리고, 여기서는 경로/크기/형식만
    기록한다. 업로더에게 업로드 보상이 지급된다.

    HTTP Status:
        201: 업로드 완료
        422: 허용되지 않는 형식, 크기 초과, 잘못된 가격
    """
    return resource_service.upload_resource(current_user.id, payload)


@router.get("", response_model=DirectPaginatedResponse[Resource])
async def list_resources(
    search: Optional[str] = Query(None, max_length=100, description="제목/설명/과목코드 검색어"),
    subject: Optional[str] = Query(None),
    file_type: Optional[str] = Query(None),
    owner_id: Optional[str] = Query(None),
    max_price: Optional[int] = Query(None, ge=0),
    sort: ResourceSort = Query(ResourceSort.NEWEST),
    limit: int = Query(
        PaginationLimits.RESOURCES["default"],
        ge=PaginationLimits.RESOURCES["min"],
        le=PaginationLimits.RESOURCES["max"],
    ),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_active_user),
    resource_service: ResourceService = Depends(get_resource_service),
) -> DirectPaginatedResponse[Resource]:
    """자료 목록 조회 (검색/필터/정렬/페이징)"""
    filters = ResourceFilters(
        search=search,
        subject=subject,
        file_type=file_type,
        owner_id=owner_id,
        max_price=max_price,
        sort=sort,
        limit=limit,
        offset=offset,
    )
    return resource_service.list_resources(filters)


@router.get("/{resource_id}", response_model=Resource)
async def get_resource(
    resource_id: int = Path(..., ge=1),
    current_user: User = Depends(get_current_active_user),
    resource_service: ResourceService = Depends(get_resource_service),
) -> Resource:
    resource = resource_service.get_resource(resource_id)
    if resource is None:
        raise NotFoundError(f"Resource {resource_id} not found")
    return resource


@router.post("/{resource_id}/download", response_model=DownloadResult)
async def download_resource(
    resource_id: int = Path(..., ge=1),
    current_user: User = Depends(get_current_active_user),
    download_service: DownloadService = Depends(get_download_service),
) -> DownloadResult:
    """
    자료 다운로드 - 가격만큼 코인 차감 후 파일 경로 반환

    HTTP Status:
        200: 정산 완료
        400: 잔액 부족
        404: 자료 없음
        409: 이미 다운로드한 자료
        422: 본인 자료
    """
    return download_service.download_resource(current_user.id, resource_id)
