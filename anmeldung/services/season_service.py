"""シーズン管理の補助関数

前シーズンからの入力値の提案と、シーズン保存前の必須項目チェック。
"""

from dataclasses import dataclass
from datetime import date

from anmeldung.models import Season


@dataclass(frozen=True)
class SeasonProposal:
    """新規シーズン作成フォームの初期値"""

    year: int
    event_number: int
    event_date: date | None = None
    signup_deadline: date | None = None
    payment_deadline: date | None = None
    is_active: bool = False


def shift_one_year(value: date | None) -> date | None:
    """日付を1年後にずらす（2月29日は2月28日にする）"""
    if value is None:
        return None
    if value.month == 2 and value.day == 29:
        return date(value.year + 1, 2, 28)
    return value.replace(year=value.year + 1)


def propose_next_season(
    last_season: Season | None, today: date | None = None
) -> SeasonProposal:
    """前シーズンを元に次シーズンの初期値を提案する

    Args:
        last_season: 直近のシーズン（無い場合はNone）
        today: 基準日（前シーズンが無い場合の年度算出に使用）

    Returns:
        年度+1、開催回+1、各日付を1年後にずらした提案。
        前シーズンが無ければ翌年・第1回・日付未設定
    """
    if last_season is None:
        return SeasonProposal(year=(today or date.today()).year + 1, event_number=1)

    return SeasonProposal(
        year=last_season.year + 1,
        event_number=(last_season.event_number or 0) + 1,
        event_date=shift_one_year(last_season.event_date),
        signup_deadline=shift_one_year(last_season.signup_deadline),
        payment_deadline=shift_one_year(last_season.payment_deadline),
    )


def validate_season_fields(
    year: int | None,
    event_date: date | None,
    signup_deadline: date | None,
    payment_deadline: date | None,
) -> list[str]:
    """シーズンの必須項目をチェックし、不足している項目のメッセージを返す"""
    missing = []
    if not year:
        missing.append("Jahr ist erforderlich")
    if event_date is None:
        missing.append("Wettkampfdatum ist erforderlich")
    if signup_deadline is None:
        missing.append("Anmeldeschluss ist erforderlich")
    if payment_deadline is None:
        missing.append("Zahlungsfrist ist erforderlich")
    return missing
