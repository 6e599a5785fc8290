from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from studyapi.models.download import Download as DownloadModel
from studyapi.schemas.download import Download as DownloadSchema
from studyapi.repositories.base import BaseRepository


class DownloadRepository(BaseRepository[DownloadModel, DownloadSchema]):
    """다운로드 기록 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(DownloadModel, DownloadSchema, db)

    def get_for_pair(self, user_id: str, resource_id: int) -> Optional[DownloadSchema]:
        model_instance = (
            self.db.query(self.model_class)
            .filter(
                self.model_class.user_id == user_id,
                self.model_class.resource_id == resource_id,
            )
            .first()
        )
        return self._to_schema(model_instance)

    def list_for_user(self, user_id: str, limit: int = 20, offset: int = 0) -> List[DownloadSchema]:
        rows = (
            self.db.query(self.model_class)
            .filter(self.model_class.user_id == user_id)
            .order_by(desc(self.model_class.id))
            .offset(offset)
            .limit(limit)
            .all()
        )
        return self._to_schemas(rows)
