"""Athleteモデル定義"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from anmeldung.models.base import Base

if TYPE_CHECKING:
    from anmeldung.models.registration import Registration


class Athlete(Base):
    """参加者モデル

    Attributes:
        id: 参加者ID（主キー、UUID文字列）
        registration_id: 申込ID（外部キー）
        first_name: 名
        last_name: 姓
        birth_year: 生年
        gender: 性別（"m" / "w"、小文字で保存）
        position: 申込内での並び順
        created_at: 作成日時
    """

    __tablename__ = "athletes"

    __table_args__ = (Index("ix_athletes_registration_id", "registration_id"),)

    id: Mapped[str] = mapped_column(
        String, primary_key=True, default=lambda: str(uuid.uuid4())
    )
    registration_id: Mapped[str] = mapped_column(
        String, ForeignKey("registrations.id", ondelete="CASCADE"), nullable=False
    )
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    birth_year: Mapped[int] = mapped_column(nullable=False)
    gender: Mapped[str] = mapped_column(String(1), nullable=False)
    position: Mapped[int] = mapped_column(nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    registration: Mapped["Registration"] = relationship(back_populates="athletes")

    def __repr__(self) -> str:
        return (
            f"<Athlete(id={self.id!r}, name={self.first_name!r} {self.last_name!r}, "
            f"birth_year={self.birth_year!r})>"
        )
