"""Registrationモデル定義"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from anmeldung.models.base import Base

if TYPE_CHECKING:
    from anmeldung.models.athlete import Athlete


class Registration(Base):
    """申込モデル

    Attributes:
        id: 申込ID（主キー、挿入時にストア側で採番）
        responsible_name: 責任者（トレーナー）氏名
        club: クラブ名（任意）
        email: 連絡先メールアドレス
        phone: 連絡先電話番号
        edit_token: 編集用トークン（作成直後に一度だけ設定）
        season_id: シーズンID（外部キー）
        created_at: 作成日時
        updated_at: 更新日時
        athletes: 参加者リスト（登録順）
    """

    __tablename__ = "registrations"

    __table_args__ = (
        Index("ix_registrations_edit_token", "edit_token", unique=True),
        Index("ix_registrations_season_id", "season_id"),
    )

    id: Mapped[str] = mapped_column(
        String, primary_key=True, default=lambda: str(uuid.uuid4())
    )
    responsible_name: Mapped[str] = mapped_column(String, nullable=False)
    club: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    email: Mapped[str] = mapped_column(String, nullable=False)
    phone: Mapped[str] = mapped_column(String, nullable=False)
    edit_token: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    season_id: Mapped[Optional[str]] = mapped_column(
        String, ForeignKey("seasons.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        default=datetime.utcnow, onupdate=datetime.utcnow
    )

    athletes: Mapped[list["Athlete"]] = relationship(
        back_populates="registration",
        cascade="all, delete-orphan",
        order_by="Athlete.position",
    )

    def __repr__(self) -> str:
        return f"<Registration(id={self.id!r}, responsible_name={self.responsible_name!r})>"
