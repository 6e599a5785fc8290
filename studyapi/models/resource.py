from typing import Optional

from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from studyapi.models.base import BaseModel, BigIntPK


class Resource(BaseModel):
    """업로드된 학습 자료. 파일 자체는 외부 object storage 에 있고 경로만 기록한다."""

    __tablename__ = "resources"
    __table_args__ = (
        CheckConstraint("coin_price >= 0", name="ck_resources_coin_price_non_negative"),
        CheckConstraint("download_count >= 0", name="ck_resources_download_count_non_negative"),
        Index("idx_resources_owner", "owner_id"),
        Index("idx_resources_subject", "subject"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    subject: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    course_code: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    file_path: Mapped[str] = mapped_column(Text, nullable=False)
    file_type: Mapped[str] = mapped_column(String(20), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    coin_price: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    download_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<Resource(id={self.id}, title={self.title!r}, price={self.coin_price})>"
