"""Seasonモデル定義"""

import uuid
from datetime import date, datetime

from sqlalchemy import Boolean, Date, String
from sqlalchemy.orm import Mapped, mapped_column

from anmeldung.models.base import Base


class Season(Base):
    """シーズン（大会の年度開催）モデル

    Attributes:
        id: シーズンID（主キー、UUID文字列）
        year: 開催年度（出場可能な生年の基準年）
        event_date: 大会日
        event_number: 通算開催回数
        signup_deadline: 申込締切日（当日23:59:59.999まで有効）
        payment_deadline: 支払期限
        is_active: 公開申込フォームで使用中かどうか
        created_at: 作成日時
    """

    __tablename__ = "seasons"

    id: Mapped[str] = mapped_column(
        String, primary_key=True, default=lambda: str(uuid.uuid4())
    )
    year: Mapped[int] = mapped_column(nullable=False)
    event_date: Mapped[date] = mapped_column(Date, nullable=False)
    event_number: Mapped[int] = mapped_column(nullable=False, default=1)
    signup_deadline: Mapped[date] = mapped_column(Date, nullable=False)
    payment_deadline: Mapped[date] = mapped_column(Date, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Season(id={self.id!r}, year={self.year!r}, active={self.is_active!r})>"
