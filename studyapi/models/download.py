from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import UniqueConstraint

from studyapi.models.base import BaseModel, BigIntPK


class Download(BaseModel):
    """다운로드 기록 - (user, resource) 쌍마다 최대 한 건"""

    __tablename__ = "downloads"
    __table_args__ = (
        # 동시 요청에 의한 중복 결제를 막는 유일한 교차 요청 보장
        UniqueConstraint("user_id", "resource_id", name="uq_downloads_user_resource"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id"), nullable=False, index=True
    )
    resource_id: Mapped[int] = mapped_column(
        ForeignKey("resources.id"), nullable=False, index=True
    )
    coins_spent: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
