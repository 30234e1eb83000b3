"""名簿の検証エンジン

validate_all は連絡先と名簿全体を毎回ゼロから検証する。
validate_field は1フィールドの変更だけを再検証し、氏名の変更時のみ
名簿全体の重複フラグを再計算する。
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Mapping, Sequence

from anmeldung.constants import ENTRY_FIELDS, NAME_FIELDS
from anmeldung.errors import (
    AnmeldungError,
    DuplicateEntryError,
    EligibilityWindowError,
    FieldValidationError,
    RosterError,
)
from anmeldung.models.entry import (
    ContactErrorState,
    ContactInfo,
    EntryErrorState,
    ParticipantEntry,
)
from anmeldung.validation.duplicates import duplicate_ids, is_duplicate
from anmeldung.validation.eligibility import EligibilityWindow, eligibility_window
from anmeldung.validation.fields import (
    is_non_empty_text,
    is_valid_birth_year,
    is_valid_email,
    is_valid_gender_code,
    is_valid_phone,
)


@dataclass(frozen=True)
class ValidationResult:
    """validate_all の結果

    Attributes:
        contact_errors: 連絡先の検証フラグ
        entry_errors: エントリID -> 検証フラグ
        errors: 利用者に提示するエラー（全件、順序は画面の並び順）
    """

    contact_errors: ContactErrorState
    entry_errors: Mapping[str, EntryErrorState] = field(default_factory=dict)
    errors: tuple[AnmeldungError, ...] = ()

    @property
    def is_valid(self) -> bool:
        """エラーが1件もなく送信可能か"""
        return not self.errors

    @property
    def messages(self) -> list[str]:
        return [str(error) for error in self.errors]


def _birth_year_ok(value: str, window: EligibilityWindow | None) -> bool:
    if not is_valid_birth_year(value):
        return False
    return window is None or window.contains(int(value))


def _field_ok(
    field_name: str, value: str, window: EligibilityWindow | None
) -> bool:
    if field_name in NAME_FIELDS:
        return is_non_empty_text(value)
    if field_name == "birth_year":
        return _birth_year_ok(value, window)
    return is_valid_gender_code(value)


def validate_contact(contact: ContactInfo) -> ContactErrorState:
    """連絡先を検証する（クラブ名は任意）"""
    return ContactErrorState(
        responsible_name_invalid=not is_non_empty_text(contact.responsible_name),
        email_invalid=not is_valid_email(contact.email),
        phone_invalid=not is_valid_phone(contact.phone),
    )


def validate_entry(
    entry: ParticipantEntry,
    roster: Sequence[ParticipantEntry],
    window: EligibilityWindow | None = None,
    duplicates: frozenset[str] | None = None,
) -> EntryErrorState:
    """1エントリの全フィールドと重複を検証する

    duplicates を渡した場合は重複判定にそれを使う（名簿全体の検証用）。
    """
    if duplicates is None:
        duplicate = is_duplicate(entry, roster)
    else:
        duplicate = entry.id in duplicates

    return EntryErrorState(
        first_name_invalid=not _field_ok("first_name", entry.first_name, window),
        last_name_invalid=not _field_ok("last_name", entry.last_name, window),
        birth_year_invalid=not _field_ok("birth_year", entry.birth_year, window),
        gender_invalid=not _field_ok("gender", entry.gender, window),
        duplicate=duplicate,
    )


def validate_all(
    contact: ContactInfo,
    roster: Sequence[ParticipantEntry],
    season_year: int | None = None,
    today: date | None = None,
) -> ValidationResult:
    """連絡先と名簿全体を検証する

    履歴に依存せず、同じ入力には常に同じ結果を返す。

    Args:
        contact: 連絡先
        roster: 名簿
        season_year: シーズン年（Noneの場合は生年範囲をチェックしない）
        today: 基準日（省略時は今日）

    Returns:
        検証結果。result.is_valid がTrueなら送信可能
    """
    window = eligibility_window(season_year, today)
    duplicates = duplicate_ids(roster)

    contact_errors = validate_contact(contact)
    entry_errors = {
        entry.id: validate_entry(entry, roster, window, duplicates)
        for entry in roster
    }

    errors = collect_errors(contact_errors, roster, entry_errors, window)
    return ValidationResult(
        contact_errors=contact_errors, entry_errors=entry_errors, errors=errors
    )


def validate_field(
    roster: Sequence[ParticipantEntry],
    entry_id: str,
    field_name: str,
    new_value: str,
    prior_errors: Mapping[str, EntryErrorState],
    season_year: int | None = None,
    today: date | None = None,
) -> dict[str, EntryErrorState]:
    """1フィールドの変更を反映したエラーマップを返す

    変更したフィールドだけを再検証し、同じエントリの他フィールドの結果は
    以前の値をそのまま引き継ぐ（validate_all が走るまで古いままでよい）。
    氏名の変更時は、変更したエントリと他の全エントリの重複フラグを再計算する。

    Args:
        roster: 名簿（変更前・変更後どちらでもよい。new_value で上書きして判定）
        entry_id: 変更したエントリのID
        field_name: 変更したフィールド名
        new_value: 新しい値
        prior_errors: 変更前のエラーマップ（変更されない）
        season_year: シーズン年
        today: 基準日

    Returns:
        新しいエラーマップ

    Raises:
        RosterError: エントリIDまたはフィールド名が不正な場合
    """
    if field_name not in ENTRY_FIELDS:
        raise RosterError(f"Unknown entry field: {field_name}")
    if not any(entry.id == entry_id for entry in roster):
        raise RosterError(f"Unknown entry id: {entry_id}")

    updated_roster = [
        entry.with_value(field_name, new_value) if entry.id == entry_id else entry
        for entry in roster
    ]
    window = eligibility_window(season_year, today)

    errors = dict(prior_errors)
    current = errors.get(entry_id, EntryErrorState())
    errors[entry_id] = current.with_flag(
        field_name, not _field_ok(field_name, new_value, window)
    )

    if field_name in NAME_FIELDS:
        duplicates = duplicate_ids(updated_roster)
        for entry in updated_roster:
            state = errors.get(entry.id, EntryErrorState())
            errors[entry.id] = replace(state, duplicate=entry.id in duplicates)

    return errors


def _entry_label(entry: ParticipantEntry, index: int) -> str:
    name = f"{entry.first_name.strip()} {entry.last_name.strip()}".strip()
    return name or f"Athlet/in {index + 1}"


def collect_errors(
    contact_errors: ContactErrorState,
    roster: Sequence[ParticipantEntry],
    entry_errors: Mapping[str, EntryErrorState],
    window: EligibilityWindow | None,
) -> tuple[AnmeldungError, ...]:
    """検証フラグを利用者向けのエラー一覧に変換する

    最初のエラーで打ち切らず、修正すべき項目をすべて返す。
    """
    errors: list[AnmeldungError] = []

    if contact_errors.responsible_name_invalid:
        errors.append(
            FieldValidationError(
                "Trainer/in Name darf nicht leer sein", "responsible_name"
            )
        )
    if contact_errors.email_invalid:
        errors.append(FieldValidationError("E-Mail-Adresse ist ungültig", "email"))
    if contact_errors.phone_invalid:
        errors.append(
            FieldValidationError(
                "Telefonnummer ist ungültig (Format: +41... mit 8-16 Ziffern)", "phone"
            )
        )

    for index, entry in enumerate(roster):
        state = entry_errors.get(entry.id)
        if state is None:
            continue
        label = _entry_label(entry, index)

        if state.first_name_invalid:
            errors.append(
                FieldValidationError(
                    f'Vorname von "{label}" darf nicht leer sein', "first_name", entry.id
                )
            )
        if state.last_name_invalid:
            errors.append(
                FieldValidationError(
                    f'Nachname von "{label}" darf nicht leer sein', "last_name", entry.id
                )
            )
        if state.birth_year_invalid:
            if is_valid_birth_year(entry.birth_year) and window is not None:
                errors.append(
                    EligibilityWindowError(
                        f'Jahrgang von "{label}" ist nicht zugelassen: {window.label()}',
                        entry.id,
                        window,
                    )
                )
            else:
                errors.append(
                    FieldValidationError(
                        f'Jahrgang von "{label}" muss 4 Ziffern haben',
                        "birth_year",
                        entry.id,
                    )
                )
        if state.gender_invalid:
            errors.append(
                FieldValidationError(
                    f'Geschlecht von "{label}" muss M oder W sein', "gender", entry.id
                )
            )
        if state.duplicate:
            errors.append(
                DuplicateEntryError(
                    f'Athlet/in "{label}" existiert bereits (Duplikat)', entry.id
                )
            )

    return tuple(errors)
