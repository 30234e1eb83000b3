"""RegistrationLifecycle - 申込の作成・編集を管理するサービス

状態遷移:
    DRAFT     画面上のみ（ストアID無し）
    SUBMITTED 作成済み。シーズン未割当のため締切の判定対象外
    EDITABLE  作成済みで、シーズンの申込締切日の終わりまで
    LOCKED    作成済みで、申込締切日を過ぎた
    DELETED   管理者が削除（取り消し可能時間内は復元できる）

EDITABLE から LOCKED への遷移は時刻のみで決まり、更新要求のたびに判定する。
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Iterator, Protocol, Sequence

from anmeldung.errors import (
    DeadlineExpiredError,
    MissingSeasonError,
    NotFoundError,
    NotificationDispatchError,
    PersistenceError,
    SubmissionInProgressError,
    ValidationFailedError,
)
from anmeldung.models import ContactInfo, ParticipantEntry, Registration, Season
from anmeldung.repositories.registration_repository import (
    contact_from_registration,
    entry_from_athlete,
)
from anmeldung.services.edit_token import derive_token
from anmeldung.services.notifier import EditLinkNotifier
from anmeldung.validation.engine import validate_all

logger = logging.getLogger(__name__)

# 締切日の終わり（23:59:59.999）
DEADLINE_END_OF_DAY = time(23, 59, 59, 999000)


class RegistrationState(str, Enum):
    """申込の状態"""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    EDITABLE = "editable"
    LOCKED = "locked"
    DELETED = "deleted"


class RegistrationStore(Protocol):
    """申込ストアのプロトコル"""

    def find_by_token(self, token: str) -> Registration | None: ...

    def insert_registration(
        self,
        contact: ContactInfo,
        participants: Sequence[ParticipantEntry],
        season_id: str,
    ) -> str: ...

    def set_edit_token(self, registration_id: str, token: str) -> None: ...

    def update_contact(self, registration_id: str, contact: ContactInfo) -> None: ...

    def replace_participants(
        self, registration_id: str, participants: Sequence[ParticipantEntry]
    ) -> None: ...

    def delete(self, registration_id: str) -> None: ...


class SeasonStore(Protocol):
    """シーズンストアのプロトコル"""

    def get(self, season_id: str) -> Season | None: ...


@dataclass(frozen=True)
class SubmitResult:
    """作成・更新の結果

    保存の成否と通知の成否を分けて返す。persisted=True, notified=False の場合は
    「保存済みだがメールアドレスを確認してほしい」と案内する。
    """

    registration_id: str
    edit_token: str
    persisted: bool
    notified: bool
    edit_link: str | None = None
    error_detail: str | None = None


def signup_deadline_end(deadline: date) -> datetime:
    """申込締切日の最終時刻"""
    return datetime.combine(deadline, DEADLINE_END_OF_DAY)


def is_deadline_passed(deadline: date | None, now: datetime) -> bool:
    """締切日の終わりを過ぎているか（締切未設定なら常にFalse）"""
    if deadline is None:
        return False
    return now > signup_deadline_end(deadline)


def registration_state(
    registration: Registration | None,
    season: Season | None,
    now: datetime | None = None,
) -> RegistrationState:
    """保存状態とシーズンから申込の状態を求める"""
    if registration is None:
        return RegistrationState.DRAFT
    if season is None:
        return RegistrationState.SUBMITTED
    if is_deadline_passed(season.signup_deadline, now or datetime.now()):
        return RegistrationState.LOCKED
    return RegistrationState.EDITABLE


class RegistrationLifecycle:
    """公開フォームからの申込の作成と編集

    1インスタンスにつき同時に1件の送信しか受け付けない。
    """

    def __init__(
        self,
        registrations: RegistrationStore,
        seasons: SeasonStore,
        notifier: EditLinkNotifier,
    ):
        """初期化

        Args:
            registrations: 申込ストア
            seasons: シーズンストア
            notifier: 編集リンク通知
        """
        self._registrations = registrations
        self._seasons = seasons
        self._notifier = notifier
        self._submitting = False

    @contextmanager
    def _submission(self) -> Iterator[None]:
        if self._submitting:
            raise SubmissionInProgressError("Anmeldung wird bereits gesendet")
        self._submitting = True
        try:
            yield
        finally:
            self._submitting = False

    def _check_deadline(self, season: Season | None, now: datetime) -> None:
        if season is not None and is_deadline_passed(season.signup_deadline, now):
            raise DeadlineExpiredError(
                "Änderungen sind nach dem Anmeldeschluss nicht mehr möglich."
            )

    def _validate(
        self,
        contact: ContactInfo,
        roster: Sequence[ParticipantEntry],
        season: Season | None,
        now: datetime,
    ) -> None:
        result = validate_all(
            contact, roster, season.year if season else None, now.date()
        )
        if not result.is_valid:
            raise ValidationFailedError(result)

    def _notify(
        self,
        email: str,
        token: str,
        registration_id: str,
        season: Season | None,
    ) -> SubmitResult:
        """編集リンクを通知する（失敗しても保存は取り消さない）"""
        try:
            edit_link = self._notifier.send_edit_link_email(
                email, token, registration_id, season.year if season else None
            )
        except NotificationDispatchError as e:
            logger.warning(
                "Registration %s saved but edit link was not sent: %s",
                registration_id,
                e,
            )
            return SubmitResult(
                registration_id=registration_id,
                edit_token=token,
                persisted=True,
                notified=False,
                edit_link=e.edit_link,
                error_detail=str(e),
            )

        return SubmitResult(
            registration_id=registration_id,
            edit_token=token,
            persisted=True,
            notified=True,
            edit_link=edit_link,
        )

    def create(
        self,
        contact: ContactInfo,
        roster: Sequence[ParticipantEntry],
        season_id: str | None,
        now: datetime | None = None,
    ) -> SubmitResult:
        """新しい申込を作成する（DRAFT -> SUBMITTED）

        トークンの保存に失敗した場合は作成した申込を削除し、PersistenceError を送出する。

        Raises:
            MissingSeasonError: シーズン未指定
            NotFoundError: シーズンが存在しない
            DeadlineExpiredError: 申込締切後
            ValidationFailedError: 入力エラーあり（全件を含む）
            PersistenceError: 保存失敗
        """
        now = now or datetime.now()

        with self._submission():
            if not season_id:
                raise MissingSeasonError(
                    "Season ist erforderlich, um eine Anmeldung zu speichern."
                )
            season = self._seasons.get(season_id)
            if season is None:
                raise NotFoundError(f"Season not found: {season_id}")

            self._check_deadline(season, now)
            self._validate(contact, roster, season, now)

            registration_id = self._registrations.insert_registration(
                contact, roster, season_id
            )
            token = derive_token(registration_id)
            try:
                self._registrations.set_edit_token(registration_id, token)
            except PersistenceError:
                logger.error(
                    "Failed to set edit token for %s, rolling back", registration_id
                )
                self._registrations.delete(registration_id)
                raise

            logger.info("Registration %s created", registration_id)
            return self._notify(contact.email.strip(), token, registration_id, season)

    def load_for_edit(
        self, token: str
    ) -> tuple[Registration, ContactInfo, tuple[ParticipantEntry, ...]]:
        """編集トークンから申込を読み込み、編集用の連絡先と名簿を返す

        Raises:
            NotFoundError: トークンに対応する申込が無い
        """
        registration = self._registrations.find_by_token(token)
        if registration is None:
            raise NotFoundError("Anmeldung nicht gefunden.")

        entries = tuple(entry_from_athlete(athlete) for athlete in registration.athletes)
        return registration, contact_from_registration(registration), entries

    def state_of(self, token: str, now: datetime | None = None) -> RegistrationState:
        """トークンの申込の現在の状態"""
        registration = self._registrations.find_by_token(token)
        if registration is None:
            raise NotFoundError("Anmeldung nicht gefunden.")
        season = self._seasons.get(registration.season_id) if registration.season_id else None
        return registration_state(registration, season, now)

    def update(
        self,
        token: str,
        contact: ContactInfo,
        roster: Sequence[ParticipantEntry],
        now: datetime | None = None,
    ) -> SubmitResult:
        """既存の申込を置き換える（EDITABLE -> EDITABLE）

        締切は入力内容に関係なく最初に確認し、過ぎていれば何も変更しない。
        連絡先を更新し、参加者は全件削除してから挿入し直す。

        Raises:
            NotFoundError: トークンに対応する申込が無い
            DeadlineExpiredError: 申込締切後
            ValidationFailedError: 入力エラーあり
            PersistenceError: 保存失敗（途中まで適用された変更は戻さない）
        """
        now = now or datetime.now()

        with self._submission():
            registration = self._registrations.find_by_token(token)
            if registration is None:
                raise NotFoundError("Anmeldung nicht gefunden.")

            season = None
            if registration.season_id:
                season = self._seasons.get(registration.season_id)

            self._check_deadline(season, now)
            self._validate(contact, roster, season, now)

            registration_id = registration.id
            edit_token = registration.edit_token or token
            self._registrations.update_contact(registration_id, contact)
            self._registrations.replace_participants(registration_id, roster)

            logger.info("Registration %s updated", registration_id)
            return self._notify(contact.email.strip(), edit_token, registration_id, season)
