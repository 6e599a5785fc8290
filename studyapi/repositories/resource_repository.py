from typing import List, Optional, Tuple

from sqlalchemy import asc, desc, or_
from sqlalchemy.orm import Session

from studyapi.models.resource import Resource as ResourceModel
from studyapi.schemas.resource import Resource as ResourceSchema, ResourceFilters, ResourceSort
from studyapi.repositories.base import BaseRepository

_SORT_ORDER = {
    ResourceSort.NEWEST: (desc(ResourceModel.created_at), desc(ResourceModel.id)),
    ResourceSort.POPULAR: (desc(ResourceModel.download_count), desc(ResourceModel.id)),
    ResourceSort.PRICE_ASC: (asc(ResourceModel.coin_price), desc(ResourceModel.id)),
    ResourceSort.PRICE_DESC: (desc(ResourceModel.coin_price), desc(ResourceModel.id)),
}


class ResourceRepository(BaseRepository[ResourceModel, ResourceSchema]):
    """학습 자료 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(ResourceModel, ResourceSchema, db)

    def get_for_update(self, resource_id: int) -> Optional[ResourceModel]:
        return self._get_model(resource_id, for_update=True)

    def search(self, filters: ResourceFilters) -> Tuple[List[ResourceSchema], int]:
        """검색/필터/정렬/페이징 - (결과, 전체 건수) 반환"""
        query = self.db.query(self.model_class)

        if filters.search:
            pattern = f"%{filters.search.strip()}%"
            query = query.filter(
                or_(
                    self.model_class.title.ilike(pattern),
                    self.model_class.description.ilike(pattern),
                    self.model_class.course_code.ilike(pattern),
                )
            )
        if filters.subject:
            query = query.filter(self.model_class.subject == filters.subject)
        if filters.file_type:
            query = query.filter(
                self.model_class.file_type == filters.file_type.lower().lstrip(".")
            )
        if filters.owner_id:
            query = query.filter(self.model_class.owner_id == filters.owner_id)
        if filters.max_price is not None:
            query = query.filter(self.model_class.coin_price <= filters.max_price)

        total_count = query.count()
        rows = (
            query.order_by(*_SORT_ORDER[filters.sort])
            .offset(filters.offset)
            .limit(filters.limit)
            .all()
        )
        return self._to_schemas(rows), total_count
