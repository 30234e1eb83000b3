"""申込リポジトリ"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from anmeldung.errors import NotFoundError, PersistenceError
from anmeldung.models import Athlete, ContactInfo, ParticipantEntry, Registration


@dataclass(frozen=True)
class AthleteSnapshot:
    """削除取り消し用の参加者スナップショット"""

    id: str
    first_name: str
    last_name: str
    birth_year: int
    gender: str
    position: int


@dataclass(frozen=True)
class RegistrationSnapshot:
    """削除取り消し用の申込スナップショット（ID・トークンを含め完全に復元する）"""

    id: str
    responsible_name: str
    club: str | None
    email: str
    phone: str
    edit_token: str | None
    season_id: str | None
    created_at: datetime
    athletes: tuple[AthleteSnapshot, ...]


def athlete_from_entry(entry: ParticipantEntry, position: int) -> Athlete:
    """画面のエントリを保存用の参加者に変換する

    氏名は前後の空白を除去し、性別は小文字で保存する。
    """
    return Athlete(
        first_name=entry.first_name.strip(),
        last_name=entry.last_name.strip(),
        birth_year=int(entry.birth_year),
        gender=entry.gender.lower(),
        position=position,
    )


def entry_from_athlete(athlete: Athlete, keep_id: bool = False) -> ParticipantEntry:
    """保存済みの参加者を編集用エントリに変換する

    Args:
        athlete: 参加者
        keep_id: Trueなら参加者IDをエントリIDに使う（管理画面用）。
                 Falseなら新しいIDを採番する（公開フォーム用）
    """
    return ParticipantEntry(
        id=athlete.id if keep_id else str(uuid.uuid4()),
        first_name=athlete.first_name,
        last_name=athlete.last_name,
        birth_year=str(athlete.birth_year),
        gender=athlete.gender.upper(),
    )


def contact_from_registration(registration: Registration) -> ContactInfo:
    return ContactInfo(
        responsible_name=registration.responsible_name,
        club_name=registration.club or "",
        email=registration.email,
        phone=registration.phone,
    )


class SQLAlchemyRegistrationRepository:
    """SQLAlchemyを使用した申込リポジトリ

    書き込みはflushまで行い、コミットは呼び出し側のセッション管理に任せる。
    """

    def __init__(self, session):
        """初期化

        Args:
            session: SQLAlchemyセッション
        """
        self.session = session

    def _flush(self, action: str) -> None:
        """flushし、失敗時はセッションを巻き戻して PersistenceError を送出"""
        try:
            self.session.flush()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceError(f"Failed to {action}: {e}") from e

    def _require(self, registration_id: str) -> Registration:
        registration = self.get(registration_id)
        if registration is None:
            raise NotFoundError(f"Registration not found: {registration_id}")
        return registration

    def get(self, registration_id: str) -> Registration | None:
        return self.session.get(Registration, registration_id)

    def find_by_token(self, token: str) -> Registration | None:
        """編集トークンで申込を検索する"""
        if not token:
            return None
        stmt = select(Registration).where(Registration.edit_token == token)
        return self.session.execute(stmt).scalars().first()

    def list_by_season(self, season_id: str) -> list[Registration]:
        """シーズンの申込を新しい順に取得する"""
        stmt = (
            select(Registration)
            .where(Registration.season_id == season_id)
            .order_by(Registration.created_at.desc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def insert_registration(
        self,
        contact: ContactInfo,
        participants: Sequence[ParticipantEntry],
        season_id: str,
    ) -> str:
        """申込と参加者を作成し、採番されたIDを返す"""
        registration = Registration(
            responsible_name=contact.responsible_name.strip(),
            club=contact.club_name.strip() or None,
            email=contact.email.strip(),
            phone=contact.phone.strip(),
            season_id=season_id,
        )
        registration.athletes = [
            athlete_from_entry(entry, position)
            for position, entry in enumerate(participants)
        ]
        self.session.add(registration)
        self._flush("save registration")
        return registration.id

    def set_edit_token(self, registration_id: str, token: str) -> None:
        """編集トークンを保存する（一度設定したトークンは変更しない）"""
        registration = self._require(registration_id)
        if registration.edit_token is not None and registration.edit_token != token:
            raise PersistenceError(
                f"Edit token already set for registration {registration_id}"
            )
        registration.edit_token = token
        self._flush("set edit token")

    def update_contact(self, registration_id: str, contact: ContactInfo) -> None:
        registration = self._require(registration_id)
        registration.responsible_name = contact.responsible_name.strip()
        registration.club = contact.club_name.strip() or None
        registration.email = contact.email.strip()
        registration.phone = contact.phone.strip()
        self._flush("update registration")

    def replace_participants(
        self, registration_id: str, participants: Sequence[ParticipantEntry]
    ) -> None:
        """参加者を全件削除してから新しい参加者を挿入する"""
        registration = self._require(registration_id)

        registration.athletes.clear()
        self._flush("delete existing athletes")

        registration.athletes.extend(
            athlete_from_entry(entry, position)
            for position, entry in enumerate(participants)
        )
        self._flush("save athletes")

    def get_athlete(self, athlete_id: str) -> Athlete | None:
        return self.session.get(Athlete, athlete_id)

    def update_athlete(self, athlete_id: str, entry: ParticipantEntry) -> None:
        athlete = self.get_athlete(athlete_id)
        if athlete is None:
            raise NotFoundError(f"Athlete not found: {athlete_id}")
        athlete.first_name = entry.first_name.strip()
        athlete.last_name = entry.last_name.strip()
        athlete.birth_year = int(entry.birth_year)
        athlete.gender = entry.gender.lower()
        self._flush(f"update athlete {athlete_id}")

    def add_athlete(self, registration_id: str, entry: ParticipantEntry) -> str:
        """参加者を末尾に追加し、採番されたIDを返す"""
        registration = self._require(registration_id)
        position = max((a.position for a in registration.athletes), default=-1) + 1
        athlete = athlete_from_entry(entry, position)
        registration.athletes.append(athlete)
        self._flush("add athlete")
        return athlete.id

    def delete_athlete(self, athlete_id: str) -> None:
        athlete = self.get_athlete(athlete_id)
        if athlete is None:
            raise NotFoundError(f"Athlete not found: {athlete_id}")
        athlete.registration.athletes.remove(athlete)
        self._flush("delete athlete")

    def snapshot(self, registration_id: str) -> RegistrationSnapshot:
        """申込と参加者の現在の内容を不変値として取得する"""
        registration = self._require(registration_id)
        return RegistrationSnapshot(
            id=registration.id,
            responsible_name=registration.responsible_name,
            club=registration.club,
            email=registration.email,
            phone=registration.phone,
            edit_token=registration.edit_token,
            season_id=registration.season_id,
            created_at=registration.created_at,
            athletes=tuple(
                AthleteSnapshot(
                    id=athlete.id,
                    first_name=athlete.first_name,
                    last_name=athlete.last_name,
                    birth_year=athlete.birth_year,
                    gender=athlete.gender,
                    position=athlete.position,
                )
                for athlete in registration.athletes
            ),
        )

    def delete(self, registration_id: str) -> None:
        """申込と参加者を削除する（存在しない場合は何もしない）"""
        registration = self.get(registration_id)
        if registration is None:
            return
        self.session.delete(registration)
        self._flush("delete registration")

    def restore(self, snapshot: RegistrationSnapshot) -> Registration:
        """スナップショットから同一のID・トークン・参加者で申込を再作成する"""
        registration = Registration(
            id=snapshot.id,
            responsible_name=snapshot.responsible_name,
            club=snapshot.club,
            email=snapshot.email,
            phone=snapshot.phone,
            edit_token=snapshot.edit_token,
            season_id=snapshot.season_id,
            created_at=snapshot.created_at,
        )
        registration.athletes = [
            Athlete(
                id=athlete.id,
                first_name=athlete.first_name,
                last_name=athlete.last_name,
                birth_year=athlete.birth_year,
                gender=athlete.gender,
                position=athlete.position,
            )
            for athlete in snapshot.athletes
        ]
        self.session.add(registration)
        self._flush("restore registration")
        return registration
