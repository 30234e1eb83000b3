"""出場可能な生年範囲

シーズン年 Y と現在年 C から、生年の許可範囲 [Y - 13, C - 1] を求める。
現在年以降に生まれた参加者は登録できない。
"""

from dataclasses import dataclass
from datetime import date

from anmeldung.constants import ELIGIBILITY_LOOKBACK_YEARS
from anmeldung.validation.fields import is_valid_birth_year


@dataclass(frozen=True)
class EligibilityWindow:
    """生年の許可範囲（両端を含む）

    Attributes:
        min_year: 最も古い（年長の）許可生年
        max_year: 最も新しい（年少の）許可生年
    """

    min_year: int
    max_year: int

    def contains(self, birth_year: int) -> bool:
        return self.min_year <= birth_year <= self.max_year

    def label(self) -> str:
        """利用者向けの範囲表示"""
        return (
            f"Jahrgang zwischen {self.min_year} und {self.max_year} "
            f"(jüngere Jahrgänge sind erlaubt)"
        )


def eligibility_window(
    season_year: int | None, today: date | None = None
) -> EligibilityWindow | None:
    """シーズン年から生年の許可範囲を求める

    Args:
        season_year: シーズンの基準年（Noneの場合は範囲チェックなし）
        today: 基準日（省略時は今日）

    Returns:
        許可範囲。シーズン年が無い場合はNone
    """
    if season_year is None:
        return None

    current_year = (today or date.today()).year
    return EligibilityWindow(
        min_year=season_year - ELIGIBILITY_LOOKBACK_YEARS,
        max_year=current_year - 1,
    )


def is_year_allowed(
    birth_year: str, season_year: int | None, today: date | None = None
) -> bool:
    """生年が許可範囲内か

    シーズン年が無い場合は常にTrue（形式チェックは is_valid_birth_year で別途行う）。
    """
    window = eligibility_window(season_year, today)
    if window is None:
        return True
    if not is_valid_birth_year(birth_year):
        return False
    return window.contains(int(birth_year))
