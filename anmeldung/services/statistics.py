"""シーズン統計の集計

申込数・参加者数・クラブ数、性別・年齢カテゴリ・生年ごとの参加者数、
クラブごとの申込数を集計する。

年齢カテゴリは現在年 C と生年 B の差で判定する:
    youngest (U10): B >= C - 9
    middle   (U12): B in {C - 10, C - 11}
    oldest   (U14): B in {C - 12, C - 13}
どのカテゴリにも入らない生年は合計にのみ含め、カテゴリには数えない。
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from anmeldung.constants import AGE_CATEGORIES, AGE_CATEGORY_ORDER
from anmeldung.models import Registration


@dataclass(frozen=True)
class ClubCount:
    """クラブごとの申込数"""

    club: str
    registrations: int


@dataclass(frozen=True)
class SeasonStatistics:
    """シーズン統計

    Attributes:
        total_registrations: 申込数
        total_participants: 参加者数
        unique_clubs: クラブ数（クラブ名が空でない申込のみ、大文字小文字を区別）
        by_gender: "m" / "w" -> 参加者数
        by_category: "youngest_m" などカテゴリと性別の組 -> 参加者数
        by_birth_year: 生年 -> 参加者数（生年の昇順）
        clubs: 申込数の降順（同数は出現順）
    """

    total_registrations: int = 0
    total_participants: int = 0
    unique_clubs: int = 0
    by_gender: dict[str, int] = field(default_factory=dict)
    by_category: dict[str, int] = field(default_factory=dict)
    by_birth_year: dict[int, int] = field(default_factory=dict)
    clubs: tuple[ClubCount, ...] = ()

    def category_total(self, category: str) -> int:
        """カテゴリの男女合計"""
        return self.by_category.get(f"{category}_m", 0) + self.by_category.get(
            f"{category}_w", 0
        )

    @property
    def uncategorized(self) -> int:
        """どのカテゴリにも入らなかった参加者数"""
        return self.total_participants - sum(
            self.category_total(category) for category in AGE_CATEGORY_ORDER
        )


def age_category(birth_year: int, current_year: int) -> str | None:
    """生年から年齢カテゴリを判定する

    Examples:
        >>> age_category(2016, 2025)
        'youngest'
        >>> age_category(2014, 2025)
        'middle'
        >>> age_category(2011, 2025) is None
        True

    Returns:
        カテゴリキー。どのカテゴリにも入らない場合はNone
    """
    age = current_year - birth_year
    for category in AGE_CATEGORY_ORDER:
        _, lower, upper = AGE_CATEGORIES[category]
        if (lower is None or age >= lower) and age <= upper:
            return category
    return None


def category_label(category: str) -> str:
    """カテゴリの表示名（U10 など）"""
    return AGE_CATEGORIES[category][0]


def calculate_statistics(
    registrations: Iterable[Registration], today: date | None = None
) -> SeasonStatistics:
    """シーズンの申込一覧から統計を計算する

    Args:
        registrations: 申込一覧（参加者を含む）
        today: 基準日（省略時は今日、年齢カテゴリの判定に使用）

    Returns:
        集計結果
    """
    current_year = (today or date.today()).year

    by_gender = {"m": 0, "w": 0}
    by_category = {
        f"{category}_{gender}": 0
        for category in AGE_CATEGORY_ORDER
        for gender in ("m", "w")
    }
    by_birth_year: Counter[int] = Counter()
    club_counts: Counter[str] = Counter()
    total_registrations = 0
    total_participants = 0

    for registration in registrations:
        total_registrations += 1
        if registration.club:
            club_counts[registration.club] += 1

        for athlete in registration.athletes:
            total_participants += 1
            by_birth_year[athlete.birth_year] += 1

            gender = athlete.gender.lower()
            if gender not in by_gender:
                continue
            by_gender[gender] += 1

            category = age_category(athlete.birth_year, current_year)
            if category is not None:
                by_category[f"{category}_{gender}"] += 1

    # Counter.most_common は同数の場合に出現順を保つ
    clubs = tuple(
        ClubCount(club=club, registrations=count)
        for club, count in club_counts.most_common()
    )

    return SeasonStatistics(
        total_registrations=total_registrations,
        total_participants=total_participants,
        unique_clubs=len(club_counts),
        by_gender=by_gender,
        by_category=by_category,
        by_birth_year=dict(sorted(by_birth_year.items())),
        clubs=clubs,
    )
