"""管理画面の申込検索"""

from typing import Iterable

from anmeldung.models import Registration


def _haystack(registration: Registration) -> list[str]:
    values = [
        registration.responsible_name,
        registration.club or "",
        registration.email,
        registration.phone,
    ]
    for athlete in registration.athletes:
        values.extend([athlete.first_name, athlete.last_name, str(athlete.birth_year)])
    return values


def filter_registrations(
    registrations: Iterable[Registration], query: str
) -> list[Registration]:
    """検索語を含む申込を元の順序のまま返す

    連絡先（担当者名・クラブ・メール・電話）と参加者（氏名・生年）を
    大文字小文字を区別せずに部分一致で検索する。空の検索語は全件を返す。
    """
    needle = query.strip().lower()
    if not needle:
        return list(registrations)

    return [
        registration
        for registration in registrations
        if any(needle in value.lower() for value in _haystack(registration))
    ]
