"""Telegram delivery sink and command listener over the Bot HTTP API."""

import logging
import threading
from typing import Optional

import requests

from .constants import REQUEST_TIMEOUT
from .errors import DeliveryError

logger = logging.getLogger('coachbot.telegram')

TELEGRAM_API_URL = 'https://api.telegram.org'
POLL_TIMEOUT = 60
# Pause after a failed poll before the next one
POLL_RETRY_DELAY = 5


class TelegramBot:
    """
    Sends report text to the league chat and answers chat commands.

    Args:
        token: Bot token from BotFather
        chat_id: Chat that scheduled reports go to (0 means unset)
        handler: CommandHandler used to answer incoming commands
        session: Optional requests session (tests pass a mock)
    """

    def __init__(self, token: str, chat_id: int, handler=None, session: Optional[requests.Session] = None,
                 api_url: str = TELEGRAM_API_URL):
        self.chat_id = chat_id
        self.handler = handler
        self.session = session or requests.Session()
        self._base = f'{api_url}/bot{token}'
        self._offset = 0

    def _call(self, method: str, payload: dict, timeout: float = REQUEST_TIMEOUT) -> dict:
        try:
            response = self.session.post(f'{self._base}/{method}', json=payload, timeout=timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            # Never log the URL, it contains the token
            raise DeliveryError(f'Telegram {method} failed: {type(e).__name__}') from e
        except ValueError as e:
            raise DeliveryError(f'Telegram {method} returned invalid JSON') from e

        if not data.get('ok'):
            raise DeliveryError(f"Telegram {method} rejected: {data.get('description', 'unknown error')}")
        return data

    def send_message(self, text: str, chat_id: Optional[int] = None) -> None:
        """Post Markdown text to chat_id (default: the configured chat)."""
        target = chat_id if chat_id is not None else self.chat_id
        if not target:
            logger.error('Chat ID not set')
            raise DeliveryError('chat ID not set')
        try:
            self._call('sendMessage', {'chat_id': target, 'text': text, 'parse_mode': 'Markdown'})
        except DeliveryError as e:
            logger.error(f'Error sending message: {e}')
            raise

    def get_updates(self, timeout: int = POLL_TIMEOUT) -> list:
        """One long-poll for new updates; advances the offset past them."""
        data = self._call(
            'getUpdates',
            {'offset': self._offset, 'timeout': timeout, 'allowed_updates': ['message']},
            timeout=timeout + REQUEST_TIMEOUT,
        )
        updates = data.get('result', [])
        if updates:
            self._offset = max(u['update_id'] for u in updates) + 1
        return updates

    def handle_update(self, update: dict) -> Optional[str]:
        """Answer one update if it is a command message. Returns the reply sent."""
        message = update.get('message') or {}
        text = message.get('text')
        chat_id = (message.get('chat') or {}).get('id')
        if not text or chat_id is None or self.handler is None:
            return None

        reply = self.handler.handle_text(text)
        if reply is None:
            return None
        try:
            self.send_message(reply, chat_id=chat_id)
        except DeliveryError:
            return None
        return reply

    def poll_commands(self, stop_event: threading.Event, timeout: int = POLL_TIMEOUT) -> None:
        """Long-poll for commands until stop_event is set."""
        logger.info('Listening for chat commands')
        while not stop_event.is_set():
            try:
                updates = self.get_updates(timeout=timeout)
            except DeliveryError as e:
                logger.error(f'Error polling updates: {e}')
                stop_event.wait(POLL_RETRY_DELAY)
                continue

            for update in updates:
                if stop_event.is_set():
                    break
                try:
                    self.handle_update(update)
                except Exception:
                    logger.exception(f"Error handling update {update.get('update_id')}")
        logger.info('Command listener stopped')
