"""入力フィールド検証関数のテスト"""

import pytest

from anmeldung.validation.fields import (
    is_non_empty_text,
    is_valid_birth_year,
    is_valid_email,
    is_valid_gender_code,
    is_valid_phone,
    normalize_name,
)


class TestIsNonEmptyText:
    """is_non_empty_text関数のテスト"""

    def test_文字があればTrue(self):
        assert is_non_empty_text("Anna") is True

    def test_空白のみはFalse(self):
        """前後の空白を除いて判定する"""
        assert is_non_empty_text("   ") is False
        assert is_non_empty_text("") is False


class TestIsValidEmail:
    """is_valid_email関数のテスト"""

    @pytest.mark.parametrize(
        "value", ["trainer@verein.ch", "a@b.c", "vorname.nachname@sub.example.org"]
    )
    def test_形式が正しいアドレス(self, value):
        assert is_valid_email(value) is True

    @pytest.mark.parametrize(
        "value", ["", "trainer", "trainer@verein", "@verein.ch", "trai ner@verein.ch"]
    )
    def test_形式が不正なアドレス(self, value):
        assert is_valid_email(value) is False

    @pytest.mark.parametrize(
        "value", [" trainer@verein.ch", "trainer@verein.ch ", " trainer@verein.ch "]
    )
    def test_前後に空白があるアドレスは不可(self, value):
        """電話番号と違い、入力値をそのまま照合する"""
        assert is_valid_email(value) is False


class TestIsValidPhone:
    """is_valid_phone関数のテスト"""

    @pytest.mark.parametrize(
        "value",
        [
            "+41 78 882 26 50",
            "+41788822650",
            "+12345678",  # 8桁（最短）
            "+1234567890123456",  # 16桁（最長）
            "  +41 78 882 26 50  ",  # 前後の空白は除去して判定
        ],
    )
    def test_国際形式の番号(self, value):
        assert is_valid_phone(value) is True

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "078 882 26 50",  # 先頭の+が無い
            "+1234567",  # 7桁は短すぎる
            "+12345678901234567",  # 17桁は長すぎる
            "+ 41788822650",  # +の直後は数字
            "+41-78-882-26-50",  # ハイフンは不可
        ],
    )
    def test_不正な番号(self, value):
        assert is_valid_phone(value) is False


class TestIsValidBirthYear:
    """is_valid_birth_year関数のテスト"""

    def test_4桁の数字(self):
        assert is_valid_birth_year("2016") is True

    @pytest.mark.parametrize("value", ["", "216", "20166", "20a6", " 2016", "２０１６"])
    def test_4桁の数字以外(self, value):
        assert is_valid_birth_year(value) is False


class TestIsValidGenderCode:
    """is_valid_gender_code関数のテスト"""

    @pytest.mark.parametrize("value", ["M", "W"])
    def test_許可されたコード(self, value):
        assert is_valid_gender_code(value) is True

    @pytest.mark.parametrize("value", ["m", "w", "", "X", "MW"])
    def test_小文字やその他のコードは不可(self, value):
        assert is_valid_gender_code(value) is False


def test_normalize_name():
    """氏名は前後空白を除去して小文字化する"""
    assert normalize_name("  Anna ") == "anna"
    assert normalize_name("MÜLLER") == "müller"
