"""出場可能な生年範囲のテスト"""

from datetime import date

from anmeldung.validation.eligibility import (
    EligibilityWindow,
    eligibility_window,
    is_year_allowed,
)

TODAY = date(2025, 6, 1)


class TestEligibilityWindow:
    """eligibility_window関数のテスト"""

    def test_シーズン年と現在年から範囲を求める(self):
        """シーズン2027・現在2025なら [2014, 2024]"""
        window = eligibility_window(2027, TODAY)
        assert window == EligibilityWindow(min_year=2014, max_year=2024)

    def test_シーズン年が無ければNone(self):
        assert eligibility_window(None, TODAY) is None

    def test_両端を含む(self):
        window = EligibilityWindow(min_year=2014, max_year=2024)
        assert window.contains(2014) is True
        assert window.contains(2024) is True
        assert window.contains(2013) is False
        assert window.contains(2025) is False

    def test_ラベルに範囲を含む(self):
        label = EligibilityWindow(min_year=2014, max_year=2024).label()
        assert "2014" in label
        assert "2024" in label


class TestIsYearAllowed:
    """is_year_allowed関数のテスト"""

    def test_範囲内の生年(self):
        assert is_year_allowed("2016", 2027, TODAY) is True

    def test_現在年生まれは不可(self):
        assert is_year_allowed("2025", 2027, TODAY) is False

    def test_古すぎる生年は不可(self):
        assert is_year_allowed("2013", 2027, TODAY) is False

    def test_シーズン年が無ければ常に許可(self):
        assert is_year_allowed("1990", None, TODAY) is True
        assert is_year_allowed("abcd", None, TODAY) is True

    def test_形式が不正ならFalse(self):
        assert is_year_allowed("16", 2027, TODAY) is False
