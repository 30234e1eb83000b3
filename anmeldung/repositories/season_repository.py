"""シーズンリポジトリ"""

from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from anmeldung.errors import NotFoundError, PersistenceError
from anmeldung.models import Season

# 更新可能なフィールド
SEASON_FIELDS = (
    "year",
    "event_date",
    "event_number",
    "signup_deadline",
    "payment_deadline",
    "is_active",
)


class SQLAlchemySeasonRepository:
    """SQLAlchemyを使用したシーズンリポジトリ"""

    def __init__(self, session):
        """初期化

        Args:
            session: SQLAlchemyセッション
        """
        self.session = session

    def _flush(self, action: str) -> None:
        try:
            self.session.flush()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceError(f"Failed to {action}: {e}") from e

    def get(self, season_id: str) -> Season | None:
        return self.session.get(Season, season_id)

    def find_active(self) -> Season | None:
        """有効なシーズンを取得する

        複数有効な場合は年度が最も新しいもの。無い場合はNone（正常な状態）。
        """
        stmt = (
            select(Season)
            .where(Season.is_active.is_(True))
            .order_by(Season.year.desc(), Season.event_number.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def find_by_year(self, year: int) -> Season | None:
        stmt = (
            select(Season)
            .where(Season.year == year)
            .order_by(Season.event_number.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def list_all(self) -> list[Season]:
        """全シーズンを新しい順に取得する"""
        stmt = select(Season).order_by(Season.year.desc(), Season.event_number.desc())
        return list(self.session.execute(stmt).scalars().all())

    def create(
        self,
        year: int,
        event_date: date,
        signup_deadline: date,
        payment_deadline: date,
        event_number: int = 1,
        is_active: bool = False,
    ) -> Season:
        season = Season(
            year=year,
            event_date=event_date,
            event_number=event_number,
            signup_deadline=signup_deadline,
            payment_deadline=payment_deadline,
            is_active=is_active,
        )
        self.session.add(season)
        self._flush("create season")
        return season

    def update(self, season_id: str, **fields) -> Season:
        """シーズンの指定フィールドを更新する

        Raises:
            NotFoundError: シーズンが存在しない場合
            ValueError: 未知のフィールドが指定された場合
        """
        season = self.get(season_id)
        if season is None:
            raise NotFoundError(f"Season not found: {season_id}")

        unknown = set(fields) - set(SEASON_FIELDS)
        if unknown:
            raise ValueError(f"Unknown season fields: {sorted(unknown)}")

        for name, value in fields.items():
            setattr(season, name, value)
        self._flush("update season")
        return season

    def delete(self, season_id: str) -> None:
        """シーズンを削除する（申込は残り、シーズン参照は外れる）"""
        season = self.get(season_id)
        if season is None:
            raise NotFoundError(f"Season not found: {season_id}")
        self.session.delete(season)
        self._flush("delete season")
