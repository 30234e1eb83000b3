"""編集トークンの生成

申込IDからハイフンを除き、URLセーフなbase64（パディングなし）に変換する。
トークンは申込作成時に一度だけ生成して保存し、以後再計算しない。
トークンからIDへの復号は行わず、検索は保存済みトークンの列で行う。
"""

import base64
import re

TOKEN_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


def derive_token(storage_id: str) -> str:
    """申込IDから編集トークンを生成する

    Examples:
        >>> derive_token("00000000-0000-0000-0000-000000000000")
        'MDAwMDAwMDAwMDAwMDAwMDAwMDAwMDAwMDAwMDAwMDA'

    Args:
        storage_id: ストアが採番した申込ID（UUID文字列）

    Returns:
        URLのパスにそのまま埋め込めるトークン
    """
    compact = storage_id.replace("-", "")
    encoded = base64.urlsafe_b64encode(compact.encode("utf-8")).decode("ascii")
    return encoded.rstrip("=")


def is_url_safe_token(token: str) -> bool:
    """トークンが [A-Za-z0-9_-] のみで構成されているか"""
    return TOKEN_PATTERN.fullmatch(token) is not None
