"""アプリケーション設定

環境変数で上書きできる設定値を定義する。
"""

import os

# SQLiteデータベースのパス
DEFAULT_DB_PATH = os.environ.get("ANMELDUNG_DB", "data/anmeldung.db")

# 編集リンクのベースURL（空文字の場合は相対リンク "/edit/<token>" を生成）
EDIT_LINK_BASE_URL = os.environ.get("ANMELDUNG_BASE_URL", "").rstrip("/")

# 編集リンクメールを送信するHTTPエンドポイント（未設定の場合は送信不可）
EMAIL_FUNCTION_URL = os.environ.get("ANMELDUNG_EMAIL_URL", "")

# メール送信リクエストのタイムアウト（秒）
EMAIL_TIMEOUT_SECONDS = float(os.environ.get("ANMELDUNG_EMAIL_TIMEOUT", "10"))

EMAIL_SUBJECT = "Ihre Anmeldung zum SCL Hallenmehrkampf - Bearbeitungslink"

# 管理画面での削除を取り消せる時間（秒）
UNDO_WINDOW_SECONDS = 10.0
