"""名簿内の重複エントリ判定"""

from collections import Counter
from typing import Iterable, Sequence

from anmeldung.models.entry import ParticipantEntry
from anmeldung.validation.fields import normalize_name


def _name_key(entry: ParticipantEntry) -> tuple[str, str] | None:
    """正規化した (名, 姓)。どちらかが空ならNone"""
    first_name = normalize_name(entry.first_name)
    last_name = normalize_name(entry.last_name)
    if not first_name or not last_name:
        return None
    return first_name, last_name


def is_duplicate(entry: ParticipantEntry, roster: Iterable[ParticipantEntry]) -> bool:
    """他のエントリに同じ氏名があるか

    生年は比較しない。名・姓のどちらかが空のエントリは重複扱いしない。

    Args:
        entry: 判定対象のエントリ
        roster: 名簿全体（entry自身を含んでよい）

    Returns:
        IDの異なるエントリに同じ正規化氏名があればTrue
    """
    key = _name_key(entry)
    if key is None:
        return False

    return any(other.id != entry.id and _name_key(other) == key for other in roster)


def duplicate_ids(roster: Sequence[ParticipantEntry]) -> frozenset[str]:
    """名簿全体で重複しているエントリIDの集合を返す

    is_duplicate を全エントリに適用した結果と同じになる。
    """
    keys = {entry.id: _name_key(entry) for entry in roster}
    counts = Counter(key for key in keys.values() if key is not None)
    return frozenset(
        entry_id for entry_id, key in keys.items() if key is not None and counts[key] > 1
    )
