"""Telegram Bot API notifier.

Delivery is best effort: every failure is logged and swallowed, so a
Telegram outage never affects attendance recording.
"""

import logging

import requests

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"
REQUEST_TIMEOUT = 10  # seconds


class TelegramNotifier:
    """Send Markdown messages to employees and the admin chat."""

    def __init__(
        self,
        bot_token: str,
        admin_chat_id: int | None = None,
        session: requests.Session | None = None,
        api_url: str = TELEGRAM_API_URL,
    ) -> None:
        """Initialize the notifier.

        Args:
            bot_token: Token from BotFather. An empty token disables delivery;
                messages are then only written to the log.
            admin_chat_id: Chat that receives late-arrival alerts.
            session: Optional pre-configured HTTP session.
            api_url: Base URL of the Bot API.
        """
        self._token = bot_token
        self._admin_chat_id = admin_chat_id
        self._session = session or requests.Session()
        self._api_url = api_url.rstrip("/")

    @property
    def enabled(self) -> bool:
        return bool(self._token)

    def send_personal(self, chat_id: int, message: str) -> None:
        """Send ``message`` to a single employee's chat."""
        self._send(chat_id, message)

    def send_admin(self, message: str) -> None:
        """Send ``message`` to the configured admin chat, if any."""
        if self._admin_chat_id is None:
            logger.info("No admin chat configured; dropping admin notification")
            return
        self._send(self._admin_chat_id, message)

    def close(self) -> None:
        self._session.close()

    def _send(self, chat_id: int, message: str) -> None:
        if not self.enabled:
            logger.info("Telegram disabled; message for chat %s: %s", chat_id, message)
            return

        url = f"{self._api_url}/bot{self._token}/sendMessage"
        payload = {"chat_id": chat_id, "text": message, "parse_mode": "Markdown"}
        try:
            resp = self._session.post(url, json=payload, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            logger.warning("Telegram send to chat %s failed: %s", chat_id, e)
            return

        if resp.status_code != 200:
            logger.warning(
                "Telegram send to chat %s failed: HTTP %d: %s",
                chat_id, resp.status_code, resp.text[:200],
            )
            return
        logger.debug("Telegram message delivered to chat %s", chat_id)
