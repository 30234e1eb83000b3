"""シーズン管理補助関数のテスト"""

from datetime import date

from anmeldung.models import Season
from anmeldung.services.season_service import (
    SeasonProposal,
    propose_next_season,
    shift_one_year,
    validate_season_fields,
)


class TestProposeNextSeason:
    """propose_next_season関数のテスト"""

    def test_前シーズンを1年ずらす(self):
        last = Season(
            year=2027,
            event_number=5,
            event_date=date(2027, 2, 6),
            signup_deadline=date(2027, 1, 15),
            payment_deadline=date(2027, 1, 31),
            is_active=True,
        )

        proposal = propose_next_season(last)

        assert proposal == SeasonProposal(
            year=2028,
            event_number=6,
            event_date=date(2028, 2, 6),
            signup_deadline=date(2028, 1, 15),
            payment_deadline=date(2028, 1, 31),
            is_active=False,
        )

    def test_前シーズンが無ければ翌年の第1回(self):
        proposal = propose_next_season(None, today=date(2026, 10, 18))

        assert proposal.year == 2027
        assert proposal.event_number == 1
        assert proposal.event_date is None
        assert proposal.signup_deadline is None


def test_うるう日は2月28日にする():
    assert shift_one_year(date(2028, 2, 29)) == date(2029, 2, 28)
    assert shift_one_year(None) is None


class TestValidateSeasonFields:
    """validate_season_fields関数のテスト"""

    def test_全項目あり(self):
        assert validate_season_fields(2028, date(2028, 2, 5), date(2028, 1, 14), date(2028, 1, 31)) == []

    def test_不足項目を全て返す(self):
        assert len(validate_season_fields(None, None, None, None)) == 4
