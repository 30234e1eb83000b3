"""申込処理のエラー定義

入力エラー（FieldValidationError, DuplicateEntryError, EligibilityWindowError）は
検証結果に集約して一度に返す。それ以外は処理を中断する例外として送出する。
"""

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from anmeldung.validation.eligibility import EligibilityWindow
    from anmeldung.validation.engine import ValidationResult


class AnmeldungError(Exception):
    """申込処理の基底例外"""


class FieldValidationError(AnmeldungError):
    """単一フィールドの入力エラー（修正して再送信可能）

    Attributes:
        entry_id: 対象エントリID（連絡先フィールドの場合はNone）
        field_name: フィールド名
    """

    def __init__(self, message: str, field_name: str, entry_id: str | None = None):
        super().__init__(message)
        self.field_name = field_name
        self.entry_id = entry_id


class DuplicateEntryError(AnmeldungError):
    """同じ氏名のエントリが名簿内に複数ある"""

    def __init__(self, message: str, entry_id: str):
        super().__init__(message)
        self.entry_id = entry_id


class EligibilityWindowError(AnmeldungError):
    """生年が出場可能範囲外

    Attributes:
        window: 許可されている生年範囲（利用者への案内用）
    """

    def __init__(self, message: str, entry_id: str, window: "EligibilityWindow"):
        super().__init__(message)
        self.entry_id = entry_id
        self.window = window


class ValidationFailedError(AnmeldungError):
    """送信時の検証で1件以上のエラーが見つかった

    Attributes:
        result: 検証結果全体
        messages: 利用者に提示する全エラーメッセージ
    """

    def __init__(self, result: "ValidationResult"):
        self.result = result
        self.messages = result.messages
        super().__init__(
            "Bitte korrigiere die folgenden Fehler:\n" + "\n".join(self.messages)
        )


class MissingSeasonError(AnmeldungError):
    """シーズン未指定のまま申込を作成しようとした"""


class DeadlineExpiredError(AnmeldungError):
    """申込締切後の変更（再試行不可、管理者への連絡が必要）"""


class NotFoundError(AnmeldungError):
    """トークンまたはIDに対応する申込が存在しない"""


class NotificationDispatchError(AnmeldungError):
    """編集リンクメールの送信失敗

    Attributes:
        edit_link: 画面に代替表示するための編集リンク
    """

    def __init__(self, message: str, edit_link: str | None = None):
        super().__init__(message)
        self.edit_link = edit_link


class PersistenceError(AnmeldungError):
    """ストアへの書き込み・読み込み失敗"""


class PartialWriteError(PersistenceError):
    """管理画面の逐次保存が途中で失敗した

    どこまで残るかはストア次第。トランザクションを持つストア（SQLAlchemyの
    リポジトリ）ではセッション全体がロールバックされ、同じ保存で先に書いた
    内容も元に戻る。

    Attributes:
        intended_fields: 保存しようとした全フィールド（適用済みとは限らない）
    """

    def __init__(self, message: str, intended_fields: Sequence[str]):
        super().__init__(message)
        self.intended_fields = tuple(intended_fields)


class UndoExpiredError(AnmeldungError):
    """取り消し可能時間の経過後、または取り消し対象がない"""


class RosterError(AnmeldungError):
    """名簿編集操作が不正（最後のエントリの削除、不明なIDなど）"""


class SubmissionInProgressError(AnmeldungError):
    """同じ名簿の送信処理が既に実行中"""
