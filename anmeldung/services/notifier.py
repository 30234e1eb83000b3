"""Edit-link notification.

Sends the edit link of a registration to the contact email address through an
HTTP mail function. Delivery failures are reported as
NotificationDispatchError so that callers can keep the saved registration and
only warn the user that the address may be wrong.
"""

import html
import logging
from typing import Protocol

import requests

from anmeldung.config import settings
from anmeldung.errors import NotificationDispatchError

logger = logging.getLogger(__name__)


class EditLinkNotifier(Protocol):
    """編集リンク通知のプロトコル"""

    def send_edit_link_email(
        self,
        to_address: str,
        token: str,
        registration_id: str,
        season_year: int | None = None,
    ) -> str:
        """編集リンクを送信し、そのリンクを返す（失敗時は NotificationDispatchError）"""
        ...


def build_edit_link(
    token: str, season_year: int | None = None, base_url: str | None = None
) -> str:
    """編集リンクURLを組み立てる

    Args:
        token: 編集トークン
        season_year: シーズン年（指定時は "/<year>/edit/<token>"）
        base_url: ベースURL（省略時は設定値）

    Returns:
        編集リンク
    """
    base = settings.EDIT_LINK_BASE_URL if base_url is None else base_url.rstrip("/")
    if season_year is not None:
        return f"{base}/{season_year}/edit/{token}"
    return f"{base}/edit/{token}"


def render_edit_link_email(edit_link: str) -> str:
    """通知メールのHTML本文を生成する"""
    link = html.escape(edit_link, quote=True)
    return (
        "<h1>Anmeldung SCL Hallenmehrkampf</h1>\n"
        "<p>Vielen Dank für Ihre Anmeldung.</p>\n"
        "<p>Über den folgenden Link können Sie Ihre Anmeldung jederzeit bearbeiten:</p>\n"
        f'<p><a href="{link}">{link}</a></p>\n'
        "<p>Falls der Link nicht klickbar ist, kopieren Sie ihn bitte in die "
        "Adresszeile Ihres Browsers.</p>\n"
    )


class HttpEditLinkNotifier:
    """Notifier posting the rendered email to an HTTP mail function.

    Attributes:
        endpoint: URL of the mail function. Empty means not configured.
        base_url: Base URL used for edit links.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        endpoint: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.endpoint = settings.EMAIL_FUNCTION_URL if endpoint is None else endpoint
        self.base_url = base_url
        self.timeout = settings.EMAIL_TIMEOUT_SECONDS if timeout is None else timeout
        self.session = session or requests.Session()

    def send_edit_link_email(
        self,
        to_address: str,
        token: str,
        registration_id: str,
        season_year: int | None = None,
    ) -> str:
        """Send the edit link and return it.

        Raises:
            NotificationDispatchError: If the mail function is not configured
                or the request fails. The error carries the edit link so it
                can still be shown to the user.
        """
        edit_link = build_edit_link(token, season_year, self.base_url)

        if not self.endpoint:
            logger.warning(
                "Email function not configured, edit link for %s not sent",
                registration_id,
            )
            raise NotificationDispatchError(
                "E-Mail-Versand ist nicht konfiguriert", edit_link=edit_link
            )

        payload = {
            "to": to_address,
            "subject": settings.EMAIL_SUBJECT,
            "html": render_edit_link_email(edit_link),
        }
        try:
            response = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Edit link email for %s failed: %s", registration_id, e)
            raise NotificationDispatchError(
                f"E-Mail konnte nicht versendet werden: {e}", edit_link=edit_link
            ) from e

        return edit_link
