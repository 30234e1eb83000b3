"""名簿編集の状態遷移

名簿とエラーマップは不変値として扱い、変更ごとに新しい RosterState を返す。
画面からはキー入力ごとに EntryChanged イベントを1つ渡す。

エラーの表示ルール:
    フィールドは一度でも編集されるか、全体検証（送信・ダウンロード時）が
    走るまでエラーを表示しない。未編集のエントリにエラーを出さないため。
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Iterable, Mapping

from anmeldung.constants import ENTRY_FIELDS, NAME_FIELDS
from anmeldung.errors import RosterError
from anmeldung.models.entry import ContactInfo, EntryErrorState, ParticipantEntry
from anmeldung.validation.duplicates import duplicate_ids
from anmeldung.validation.engine import ValidationResult, validate_all, validate_field
from anmeldung.validation.fields import is_valid_gender_code


@dataclass(frozen=True)
class EntryChanged:
    """1フィールドの変更イベント"""

    entry_id: str
    field_name: str
    value: str


@dataclass(frozen=True)
class RosterState:
    """編集中の名簿とその検証状態

    Attributes:
        entries: 名簿（画面の並び順）
        errors: エントリID -> 検証フラグ。削除済みエントリの古い値が残ってもよい
        touched: 編集済みの (エントリID, フィールド名)
        show_all: 全体検証が一度でも走ったか
        season_year: 生年範囲の基準となるシーズン年
    """

    entries: tuple[ParticipantEntry, ...]
    errors: Mapping[str, EntryErrorState] = field(default_factory=dict)
    touched: frozenset[tuple[str, str]] = frozenset()
    show_all: bool = False
    season_year: int | None = None

    def entry(self, entry_id: str) -> ParticipantEntry:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        raise RosterError(f"Unknown entry id: {entry_id}")


def new_roster(season_year: int | None = None) -> RosterState:
    """空のエントリを1件持つ名簿を作成する"""
    return RosterState(entries=(ParticipantEntry.blank(),), season_year=season_year)


def add_entry(state: RosterState) -> RosterState:
    """末尾に空のエントリを追加する"""
    return replace(state, entries=state.entries + (ParticipantEntry.blank(),))


def remove_entry(state: RosterState, entry_id: str) -> RosterState:
    """エントリを削除する

    残ったエントリのうち検証済みのものは重複フラグを再計算する。
    削除したエントリのエラー情報は残す（参照されないので無害）。

    Raises:
        RosterError: 最後の1件を削除しようとした場合、またはIDが不明な場合
    """
    state.entry(entry_id)
    if len(state.entries) <= 1:
        raise RosterError("Die letzte Athletin / der letzte Athlet kann nicht entfernt werden")

    entries = tuple(entry for entry in state.entries if entry.id != entry_id)
    duplicates = duplicate_ids(entries)
    errors = dict(state.errors)
    for entry in entries:
        if entry.id in errors:
            errors[entry.id] = replace(errors[entry.id], duplicate=entry.id in duplicates)

    return replace(state, entries=entries, errors=errors)


def apply_change(
    state: RosterState, event: EntryChanged, today: date | None = None
) -> RosterState:
    """変更イベントを適用し、インクリメンタル検証した新しい状態を返す"""
    errors = validate_field(
        state.entries,
        event.entry_id,
        event.field_name,
        event.value,
        state.errors,
        season_year=state.season_year,
        today=today,
    )
    entries = tuple(
        entry.with_value(event.field_name, event.value)
        if entry.id == event.entry_id
        else entry
        for entry in state.entries
    )
    return replace(
        state,
        entries=entries,
        errors=errors,
        touched=state.touched | {(event.entry_id, event.field_name)},
    )


def reveal_all(
    state: RosterState, contact: ContactInfo, today: date | None = None
) -> tuple[RosterState, ValidationResult]:
    """全体検証を実行し、以後すべてのエラーを表示する（送信・ダウンロード時）"""
    result = validate_all(contact, state.entries, state.season_year, today)
    return replace(state, errors=dict(result.entry_errors), show_all=True), result


def visible_errors(state: RosterState, entry_id: str) -> EntryErrorState:
    """画面に表示すべきエラーを返す

    未検証のエントリや未編集のフィールドのフラグは落とす。
    重複は名・姓のどちらかを編集していれば表示する。
    """
    errors = state.errors.get(entry_id)
    if errors is None:
        return EntryErrorState()
    if state.show_all:
        return errors

    touched = {name for touched_id, name in state.touched if touched_id == entry_id}
    visible = EntryErrorState()
    for field_name in ENTRY_FIELDS:
        if field_name in touched:
            visible = visible.with_flag(field_name, errors.is_invalid(field_name))
    return replace(visible, duplicate=errors.duplicate and bool(touched & NAME_FIELDS))


def _cell_text(value: object) -> str:
    """表のセル値を文字列にする（表計算ソフトの 2016.0 は "2016"）"""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def import_entries(
    state: RosterState, rows: Iterable[Mapping[str, object]]
) -> tuple[RosterState, int]:
    """読み込み済みの表データを名簿に取り込む

    必須項目が空、または性別コードが不正な行は読み飛ばす。完全に空の行は
    数えない。名簿が未入力のエントリ1件だけの場合は置き換える。

    Args:
        state: 現在の名簿
        rows: first_name, last_name, birth_year, gender をキーに持つ行

    Returns:
        (新しい名簿, 読み飛ばした行数)
    """
    imported: list[ParticipantEntry] = []
    skipped = 0

    for row in rows:
        values = {name: _cell_text(row.get(name)) for name in ENTRY_FIELDS}
        values["gender"] = values["gender"].upper()

        if not any(values.values()):
            continue
        if not all(values.values()) or not is_valid_gender_code(values["gender"]):
            skipped += 1
            continue

        imported.append(replace(ParticipantEntry.blank(), **values))

    if not imported:
        return state, skipped

    if len(state.entries) == 1 and state.entries[0].is_blank:
        entries = tuple(imported)
    else:
        entries = state.entries + tuple(imported)

    return replace(state, entries=entries), skipped
