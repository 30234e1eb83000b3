"""管理画面のサービス

申込の一覧・検索・統計、参加者単位の編集、取り消し可能な削除、シーズン管理。
削除は取り消し可能時間（既定10秒）の間だけ元に戻せる。他の変更操作を行うと
保留中の取り消しは破棄される。
"""

import logging
import time
from dataclasses import dataclass
from datetime import date
from typing import Callable, Sequence

from anmeldung.config.settings import UNDO_WINDOW_SECONDS
from anmeldung.errors import (
    NotFoundError,
    PartialWriteError,
    PersistenceError,
    RosterError,
    UndoExpiredError,
    ValidationFailedError,
)
from anmeldung.models import ContactInfo, ParticipantEntry, Registration, Season
from anmeldung.repositories.registration_repository import (
    RegistrationSnapshot,
    SQLAlchemyRegistrationRepository,
    contact_from_registration,
    entry_from_athlete,
)
from anmeldung.repositories.season_repository import SQLAlchemySeasonRepository
from anmeldung.services.search import filter_registrations
from anmeldung.services.season_service import validate_season_fields
from anmeldung.services.statistics import SeasonStatistics, calculate_statistics
from anmeldung.validation.engine import validate_all

logger = logging.getLogger(__name__)

CONTACT_COLUMNS = ("responsible_name", "club", "email", "phone")
ATHLETE_COLUMNS = ("first_name", "last_name", "birth_year", "gender")


@dataclass(frozen=True)
class DeletedRegistration:
    """取り消し待ちの削除

    Attributes:
        snapshot: 削除直前の申込の内容
        deleted_at: 削除時刻（clockの値）
        expires_at: 取り消し期限（clockの値）
    """

    snapshot: RegistrationSnapshot
    deleted_at: float
    expires_at: float

    @property
    def registration_id(self) -> str:
        return self.snapshot.id

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at

    def remaining(self, now: float) -> float:
        """取り消し期限までの残り秒数"""
        return max(0.0, self.expires_at - now)


def intended_fields(
    registration_id: str, entries: Sequence[ParticipantEntry]
) -> list[str]:
    """管理画面の保存で書き込む予定の全フィールド名"""
    fields = [f"registration[{registration_id}].{column}" for column in CONTACT_COLUMNS]
    for entry in entries:
        fields.extend(f"athlete[{entry.id}].{column}" for column in ATHLETE_COLUMNS)
    return fields


class AdminService:
    """管理画面の操作"""

    def __init__(
        self,
        registrations: SQLAlchemyRegistrationRepository,
        seasons: SQLAlchemySeasonRepository,
        undo_window: float = UNDO_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """初期化

        Args:
            registrations: 申込リポジトリ
            seasons: シーズンリポジトリ
            undo_window: 削除の取り消し可能時間（秒）
            clock: 経過時間の計測に使う時計
        """
        self.registrations = registrations
        self.seasons = seasons
        self.undo_window = undo_window
        self.clock = clock
        self._pending: DeletedRegistration | None = None

    # --- 参照 ---

    def list_registrations(self, season_id: str, query: str = "") -> list[Registration]:
        """シーズンの申込を新しい順に取得し、検索語で絞り込む"""
        return filter_registrations(self.registrations.list_by_season(season_id), query)

    def statistics(self, season_id: str, today: date | None = None) -> SeasonStatistics:
        return calculate_statistics(self.registrations.list_by_season(season_id), today)

    def load_registration(
        self, registration_id: str
    ) -> tuple[ContactInfo, tuple[ParticipantEntry, ...]]:
        """編集用に連絡先と参加者を取得する（エントリIDは参加者IDのまま）"""
        registration = self.registrations.get(registration_id)
        if registration is None:
            raise NotFoundError(f"Registration not found: {registration_id}")
        entries = tuple(
            entry_from_athlete(athlete, keep_id=True)
            for athlete in registration.athletes
        )
        return contact_from_registration(registration), entries

    # --- 編集 ---

    def save_registration_changes(
        self,
        registration_id: str,
        contact: ContactInfo,
        entries: Sequence[ParticipantEntry],
    ) -> None:
        """連絡先と参加者の変更を保存する

        entries は申込に属する参加者の一部でもよい。保存済みの名簿に変更を
        重ねた名簿全体を公開フォームと同じ規則で検証したあと、連絡先、各参加者の
        順に1件ずつ書き込む。

        途中で失敗した場合、このサービス自身は適用済みの書き込みを戻さない。
        ただしSQLAlchemyのリポジトリはflush失敗時にセッション全体をロールバック
        するため、同じ保存で先に書いた内容も元に戻る。

        Raises:
            NotFoundError: 申込が存在しない
            RosterError: 他の申込に属する参加者IDが含まれている
            ValidationFailedError: 入力エラーあり（何も書き込まない）
            PartialWriteError: 書き込みの途中で失敗した
        """
        self.cancel_undo()

        _, stored = self.load_registration(registration_id)
        stored_ids = {entry.id for entry in stored}
        foreign = [entry.id for entry in entries if entry.id not in stored_ids]
        if foreign:
            raise RosterError(
                f"Teilnehmer gehören nicht zu Anmeldung {registration_id}: "
                + ", ".join(foreign)
            )

        edited = {entry.id: entry for entry in entries}
        roster = [edited.get(entry.id, entry) for entry in stored]

        result = validate_all(contact, roster)
        if not result.is_valid:
            raise ValidationFailedError(result)

        try:
            self.registrations.update_contact(registration_id, contact)
            for entry in entries:
                self.registrations.update_athlete(entry.id, entry)
        except (PersistenceError, NotFoundError) as e:
            logger.error("Saving registration %s failed: %s", registration_id, e)
            raise PartialWriteError(
                f"Änderungen konnten nicht gespeichert werden: {e}",
                intended_fields(registration_id, entries),
            ) from e

    def add_athlete(self, registration_id: str, entry: ParticipantEntry) -> str:
        """参加者を1人追加し、採番された参加者IDを返す

        既存の参加者と合わせた名簿で検証する（重複も対象）。
        """
        self.cancel_undo()

        contact, existing = self.load_registration(registration_id)
        result = validate_all(contact, [*existing, entry])
        if not result.is_valid:
            raise ValidationFailedError(result)

        return self.registrations.add_athlete(registration_id, entry)

    def remove_athlete(self, athlete_id: str) -> None:
        """参加者を1人削除する（最後の1人は削除できない）"""
        self.cancel_undo()

        athlete = self.registrations.get_athlete(athlete_id)
        if athlete is None:
            raise NotFoundError(f"Athlete not found: {athlete_id}")
        if len(athlete.registration.athletes) <= 1:
            raise RosterError("Mindestens ein/e Athlet/in ist erforderlich.")
        self.registrations.delete_athlete(athlete_id)

    # --- 削除と取り消し ---

    def delete_registration(self, registration_id: str) -> DeletedRegistration:
        """申込を参加者ごと削除し、取り消し待ちとして記録する"""
        self.cancel_undo()

        snapshot = self.registrations.snapshot(registration_id)
        self.registrations.delete(registration_id)

        now = self.clock()
        self._pending = DeletedRegistration(
            snapshot=snapshot, deleted_at=now, expires_at=now + self.undo_window
        )
        logger.info("Registration %s deleted", registration_id)
        return self._pending

    @property
    def pending_undo(self) -> DeletedRegistration | None:
        """取り消し可能な削除（期限切れならNone）"""
        if self._pending is None or self._pending.is_expired(self.clock()):
            return None
        return self._pending

    def cancel_undo(self) -> None:
        """保留中の取り消しを破棄する"""
        self._pending = None

    def undo_delete(self) -> Registration:
        """直前の削除を取り消し、同じID・トークン・参加者で申込を復元する

        復元に失敗した場合は保留中の削除を残し、期限内なら再実行できる。

        Raises:
            UndoExpiredError: 取り消し対象が無い、または期限切れ
            PersistenceError: 復元の書き込みに失敗した
        """
        pending = self._pending
        if pending is None:
            raise UndoExpiredError("Es gibt nichts rückgängig zu machen.")

        if pending.is_expired(self.clock()):
            self._pending = None
            logger.warning(
                "Undo window for registration %s has expired", pending.registration_id
            )
            raise UndoExpiredError("Rückgängig machen ist nicht mehr möglich.")

        registration = self.registrations.restore(pending.snapshot)
        self._pending = None
        logger.info("Registration %s restored", pending.registration_id)
        return registration

    # --- シーズン ---

    def create_season(
        self,
        year: int | None,
        event_date: date | None,
        signup_deadline: date | None,
        payment_deadline: date | None,
        event_number: int = 1,
        is_active: bool = False,
    ) -> Season:
        """シーズンを作成する

        Raises:
            ValueError: 必須項目が不足している場合
        """
        self.cancel_undo()

        missing = validate_season_fields(year, event_date, signup_deadline, payment_deadline)
        if missing:
            raise ValueError("; ".join(missing))
        return self.seasons.create(
            year=year,
            event_date=event_date,
            signup_deadline=signup_deadline,
            payment_deadline=payment_deadline,
            event_number=event_number,
            is_active=is_active,
        )

    def update_season(self, season_id: str, **fields) -> Season:
        self.cancel_undo()
        return self.seasons.update(season_id, **fields)

    def delete_season(self, season_id: str) -> None:
        """シーズンを削除する（申込は残る）"""
        self.cancel_undo()
        self.seasons.delete(season_id)
