"""入力フィールドの検証関数

各関数は副作用を持たず、真偽値のみを返す。
"""

import re

from anmeldung.constants import GENDER_CODES

# 形だけの確認（RFC準拠ではない）
EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

# "+" と数字1桁、続いて数字または空白が6-14文字、最後に数字
PHONE_PATTERN = re.compile(r"\+[0-9](?:[0-9\s]{6,14}[0-9])")

BIRTH_YEAR_PATTERN = re.compile(r"[0-9]{4}")


def normalize_name(value: str) -> str:
    """重複判定用に氏名を正規化する（前後空白除去・小文字化）"""
    return value.strip().lower()


def is_non_empty_text(value: str) -> bool:
    """空白除去後に1文字以上あるか"""
    return len(value.strip()) > 0


def is_valid_email(value: str) -> bool:
    """メールアドレスの形式が "<文字>@<文字>.<文字>" か"""
    return EMAIL_PATTERN.fullmatch(value) is not None


def is_valid_phone(value: str) -> bool:
    """国際形式の電話番号か

    Examples:
        >>> is_valid_phone("+41 78 882 26 50")
        True
        >>> is_valid_phone("078 882 26 50")
        False
    """
    return PHONE_PATTERN.fullmatch(value.strip()) is not None


def is_valid_birth_year(value: str) -> bool:
    """ちょうど4桁のASCII数字か（範囲は EligibilityWindow で確認）"""
    return BIRTH_YEAR_PATTERN.fullmatch(value) is not None


def is_valid_gender_code(value: str) -> bool:
    """性別コードが "M" または "W" か（大文字のみ）"""
    return value in GENDER_CODES
