"""AdminServiceのテスト"""

from datetime import date
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from anmeldung.db import get_engine, init_db
from anmeldung.errors import (
    NotFoundError,
    PartialWriteError,
    PersistenceError,
    RosterError,
    UndoExpiredError,
    ValidationFailedError,
)
from anmeldung.models import Athlete, ContactInfo, ParticipantEntry, Registration
from anmeldung.repositories import (
    SQLAlchemyRegistrationRepository,
    SQLAlchemySeasonRepository,
)
from anmeldung.services.admin_service import AdminService, intended_fields


class FakeClock:
    """手動で進める時計"""

    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


CONTACT = ContactInfo("Petra Trainer", "LV Langenthal", "petra@verein.ch", "+41 78 882 26 50")


@pytest.fixture
def session():
    engine = get_engine(":memory:")
    init_db(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registrations(session):
    return SQLAlchemyRegistrationRepository(session)


@pytest.fixture
def season(session):
    return SQLAlchemySeasonRepository(session).create(
        year=2027,
        event_date=date(2027, 2, 6),
        signup_deadline=date(2027, 1, 15),
        payment_deadline=date(2027, 1, 31),
        is_active=True,
    )


@pytest.fixture
def admin(session, registrations, clock):
    return AdminService(registrations, SQLAlchemySeasonRepository(session), clock=clock)


@pytest.fixture
def registration_id(registrations, season):
    registration_id = registrations.insert_registration(
        CONTACT,
        [
            ParticipantEntry(id="x", first_name="Anna", last_name="Muster", birth_year="2016", gender="W"),
            ParticipantEntry(id="y", first_name="Ben", last_name="Keller", birth_year="2015", gender="M"),
        ],
        season.id,
    )
    registrations.set_edit_token(registration_id, "token-1")
    return registration_id


class TestListing:
    """一覧・統計のテスト"""

    def test_検索語で絞り込む(self, admin, registrations, season, registration_id):
        registrations.insert_registration(
            ContactInfo("Max Coach", "TV Bern", "max@tvbern.ch", "+41 79 111 22 33"),
            [ParticipantEntry(id="z", first_name="Clara", last_name="Frei", birth_year="2014", gender="W")],
            season.id,
        )

        assert len(admin.list_registrations(season.id)) == 2
        [found] = admin.list_registrations(season.id, "keller")
        assert found.id == registration_id

    def test_統計(self, admin, season, registration_id):
        stats = admin.statistics(season.id, today=date(2025, 6, 1))
        assert stats.total_registrations == 1
        assert stats.total_participants == 2
        assert stats.by_gender == {"m": 1, "w": 1}


class TestSaveRegistrationChanges:
    """save_registration_changesのテスト"""

    def test_連絡先と各参加者を更新する(self, session, admin, registration_id):
        contact, entries = admin.load_registration(registration_id)
        entries = [entries[0].with_value("first_name", "Annina"), entries[1]]

        admin.save_registration_changes(
            registration_id, ContactInfo("Petra Neu", "", "petra@verein.ch", "+41 78 882 26 50"), entries
        )

        session.expire_all()
        registration = session.get(Registration, registration_id)
        assert registration.responsible_name == "Petra Neu"
        assert registration.club is None
        assert [a.first_name for a in registration.athletes] == ["Annina", "Ben"]
        # 参加者IDは変わらない
        assert [a.id for a in registration.athletes] == [e.id for e in entries]

    def test_公開フォームと同じ規則で検証する(self, admin, registration_id):
        contact, entries = admin.load_registration(registration_id)
        entries = [entries[0], entries[1].with_value("first_name", "anna").with_value("last_name", "MUSTER")]

        with pytest.raises(ValidationFailedError) as exc_info:
            admin.save_registration_changes(registration_id, contact, entries)

        assert len(exc_info.value.messages) == 2

    def test_他の申込の参加者は書き換えない(self, session, admin, registrations, season, registration_id):
        other_id = registrations.insert_registration(
            ContactInfo("Max Coach", "TV Bern", "max@tvbern.ch", "+41 79 111 22 33"),
            [ParticipantEntry(id="z", first_name="Carla", last_name="Frei", birth_year="2014", gender="W")],
            season.id,
        )
        contact, _ = admin.load_registration(registration_id)
        _, [other_entry] = admin.load_registration(other_id)

        with pytest.raises(RosterError):
            admin.save_registration_changes(
                registration_id, contact, [other_entry.with_value("first_name", "Ida")]
            )

        session.expire_all()
        assert [a.first_name for a in session.get(Registration, other_id).athletes] == ["Carla"]

    def test_編集していない参加者との重複も検出する(self, session, admin, registration_id):
        contact, entries = admin.load_registration(registration_id)
        renamed = entries[1].with_value("first_name", "Anna").with_value("last_name", "Muster")

        with pytest.raises(ValidationFailedError) as exc_info:
            admin.save_registration_changes(registration_id, contact, [renamed])

        assert len(exc_info.value.messages) == 2
        session.expire_all()
        assert [a.first_name for a in session.get(Registration, registration_id).athletes] == [
            "Anna",
            "Ben",
        ]

    def test_一部の参加者だけ保存できる(self, session, admin, registration_id):
        contact, entries = admin.load_registration(registration_id)

        admin.save_registration_changes(
            registration_id, contact, [entries[1].with_value("birth_year", "2014")]
        )

        session.expire_all()
        assert [a.birth_year for a in session.get(Registration, registration_id).athletes] == [
            2016,
            2014,
        ]

    def test_DBの書き込み失敗ではセッション全体が巻き戻る(self, session, admin, registration_id):
        session.commit()
        contact, entries = admin.load_registration(registration_id)
        real_flush = session.flush

        def flush(*args, **kwargs):
            if any(isinstance(obj, Athlete) for obj in session.dirty):
                raise OperationalError("UPDATE athletes", {}, Exception("database is locked"))
            return real_flush(*args, **kwargs)

        with patch.object(session, "flush", side_effect=flush):
            with pytest.raises(PartialWriteError) as exc_info:
                admin.save_registration_changes(
                    registration_id,
                    ContactInfo("Petra Neu", "", "petra@verein.ch", "+41 78 882 26 50"),
                    [entries[0].with_value("first_name", "Annina")],
                )

        assert f"registration[{registration_id}].responsible_name" in exc_info.value.intended_fields
        # 先に書いた連絡先も元に戻っている
        registration = session.get(Registration, registration_id)
        assert registration.responsible_name == "Petra Trainer"
        assert [a.first_name for a in registration.athletes] == ["Anna", "Ben"]

    def test_途中で失敗したら予定していた全フィールドを報告する(self, clock):
        registrations = MagicMock()
        registrations.get.return_value = Registration(
            id="r1",
            responsible_name="Petra Trainer",
            club="LV Langenthal",
            email="petra@verein.ch",
            phone="+41 78 882 26 50",
            athletes=[
                Athlete(id="a1", first_name="Anna", last_name="Muster", birth_year=2016, gender="w"),
                Athlete(id="a2", first_name="Ben", last_name="Keller", birth_year=2015, gender="m"),
            ],
        )
        registrations.update_athlete.side_effect = [None, PersistenceError("locked")]
        admin = AdminService(registrations, MagicMock(), clock=clock)
        entries = [
            ParticipantEntry(id="a1", first_name="Anna", last_name="Muster", birth_year="2016", gender="W"),
            ParticipantEntry(id="a2", first_name="Ben", last_name="Keller", birth_year="2015", gender="M"),
        ]

        with pytest.raises(PartialWriteError) as exc_info:
            admin.save_registration_changes("r1", CONTACT, entries)

        assert exc_info.value.intended_fields == tuple(intended_fields("r1", entries))
        assert "athlete[a2].first_name" in exc_info.value.intended_fields
        assert "registration[r1].email" in exc_info.value.intended_fields
        # サービス自身は適用済みの書き込みを戻さない
        registrations.update_contact.assert_called_once()
        assert registrations.update_athlete.call_count == 2
        registrations.delete.assert_not_called()


class TestAthletes:
    """参加者の追加・削除のテスト"""

    def test_参加者を追加する(self, session, admin, registration_id):
        athlete_id = admin.add_athlete(
            registration_id,
            ParticipantEntry(id="new", first_name="Clara", last_name="Frei", birth_year="2014", gender="W"),
        )

        athlete = session.get(Athlete, athlete_id)
        assert athlete.registration_id == registration_id
        assert athlete.position == 2

    def test_重複する参加者は追加できない(self, admin, registration_id):
        with pytest.raises(ValidationFailedError):
            admin.add_athlete(
                registration_id,
                ParticipantEntry(id="new", first_name="Anna", last_name="Muster", birth_year="2012", gender="W"),
            )

    def test_参加者を削除する(self, session, admin, registration_id):
        _, entries = admin.load_registration(registration_id)

        admin.remove_athlete(entries[0].id)

        assert [a.first_name for a in session.get(Registration, registration_id).athletes] == ["Ben"]

    def test_最後の参加者は削除できない(self, admin, registration_id):
        _, entries = admin.load_registration(registration_id)
        admin.remove_athlete(entries[0].id)

        with pytest.raises(RosterError):
            admin.remove_athlete(entries[1].id)

    def test_存在しない参加者(self, admin):
        with pytest.raises(NotFoundError):
            admin.remove_athlete("missing")


class TestDeleteAndUndo:
    """削除と取り消しのテスト"""

    def test_期限内なら同じ内容で復元する(self, session, admin, clock, registration_id):
        before = admin.registrations.snapshot(registration_id)

        deleted = admin.delete_registration(registration_id)
        assert session.get(Registration, registration_id) is None
        assert deleted.remaining(clock()) == 10.0

        clock.advance(9.5)
        restored = admin.undo_delete()

        assert restored.id == registration_id
        assert admin.registrations.snapshot(registration_id) == before
        assert admin.registrations.find_by_token("token-1").id == registration_id
        assert admin.pending_undo is None

    def test_期限を過ぎると復元できない(self, session, admin, clock, registration_id, caplog):
        admin.delete_registration(registration_id)
        clock.advance(10.5)

        assert admin.pending_undo is None
        with pytest.raises(UndoExpiredError):
            admin.undo_delete()
        assert session.get(Registration, registration_id) is None
        assert "expired" in caplog.text

    def test_他の操作で取り消しは破棄される(self, admin, registration_id, season):
        admin.delete_registration(registration_id)
        assert admin.pending_undo is not None

        admin.update_season(season.id, is_active=False)

        with pytest.raises(UndoExpiredError):
            admin.undo_delete()

    def test_復元に失敗しても期限内なら再実行できる(self, session, admin, clock, registration_id):
        admin.delete_registration(registration_id)

        with patch.object(admin.registrations, "restore", side_effect=PersistenceError("disk full")):
            with pytest.raises(PersistenceError):
                admin.undo_delete()

        assert admin.pending_undo is not None
        clock.advance(2)
        restored = admin.undo_delete()

        assert restored.id == registration_id
        assert admin.pending_undo is None
        assert [a.first_name for a in session.get(Registration, registration_id).athletes] == [
            "Anna",
            "Ben",
        ]

    def test_取り消し対象が無い(self, admin):
        with pytest.raises(UndoExpiredError):
            admin.undo_delete()

    def test_取り消しは一度だけ(self, admin, registration_id):
        admin.delete_registration(registration_id)
        admin.undo_delete()

        with pytest.raises(UndoExpiredError):
            admin.undo_delete()


class TestSeasons:
    """シーズン管理のテスト"""

    def test_必須項目が無ければ作成できない(self, admin):
        with pytest.raises(ValueError, match="Anmeldeschluss"):
            admin.create_season(2028, date(2028, 2, 5), None, date(2028, 1, 31))

    def test_シーズンを削除しても申込は残る(self, session, admin, season, registration_id):
        admin.delete_season(season.id)
        session.expire_all()

        assert session.get(Registration, registration_id).season_id is None
