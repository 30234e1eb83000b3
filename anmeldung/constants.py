"""Constants for the event registration system."""

# 性別コード（画面上の正規形は大文字、DB上は小文字で保存）
GENDER_CODES: tuple[str, ...] = ("M", "W")

# 参加者エントリのフィールド名
ENTRY_FIELDS: tuple[str, ...] = ("first_name", "last_name", "birth_year", "gender")

# 重複判定に関わるフィールド
NAME_FIELDS: frozenset[str] = frozenset({"first_name", "last_name"})

# 連絡先のフィールド名（club_nameは任意入力）
CONTACT_FIELDS: tuple[str, ...] = ("responsible_name", "club_name", "email", "phone")

# 出場可能な最も古い生年 = シーズン年 - 13
ELIGIBILITY_LOOKBACK_YEARS = 13

# 年齢カテゴリ: キー -> (表示名, 現在年との差の下限, 上限)
# 下限がNoneのカテゴリは上限より若い全員を含む
AGE_CATEGORIES: dict[str, tuple[str, int | None, int]] = {
    "youngest": ("U10", None, 9),
    "middle": ("U12", 10, 11),
    "oldest": ("U14", 12, 13),
}

# カテゴリ判定の順序（若い順）
AGE_CATEGORY_ORDER: tuple[str, ...] = ("youngest", "middle", "oldest")
