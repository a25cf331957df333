"""
services/notifier.py
--------------------
Sends new-submission alerts to the administrator chat.

Notification is a best-effort side channel: `dispatch()` schedules the send
as a background task and returns immediately, so the HTTP response never
waits on (or reflects) the Telegram call. Failures are logged and dropped;
there is no retry. `drain()` lets the shutdown sequence wait for sends
still in flight.
"""

import asyncio

from telegram.error import TelegramError

from errors import NotifyError
from models.user_record import UserRecord
from utils.logger import get_logger

logger = get_logger(__name__)


def format_message(record: UserRecord) -> str:
    """Render the fixed admin alert template for a record."""
    consent = "yes" if record.checkbox1 else "no"
    return (
        "📥 New user registered\n\n"
        f"🆔 ID: {record.id}\n"
        f"👤 Name: {record.name}\n"
        f"📧 Email: {record.email}\n"
        f"📱 Mobile: {record.mobile}\n"
        f"✅ Consent: {consent}"
    )


class AdminNotifier:
    """Delivers alerts about new records to one administrator chat."""

    def __init__(self, bot, chat_id: int | str | None):
        """
        Args:
            bot: A telegram.Bot (or anything with an async ``send_message``).
            chat_id: Administrator chat id. Empty disables notifications.
        """
        self.bot = bot
        self.chat_id = chat_id
        self._pending: set[asyncio.Task] = set()

    async def notify(self, record: UserRecord) -> None:
        """
        Send the alert for ``record``.

        Raises:
            NotifyError: If Telegram rejects or cannot deliver the message.
        """
        if not self.chat_id:
            logger.warning(f"ADMIN_CHAT_ID not set, skipping notification for user {record.id}")
            return
        try:
            await self.bot.send_message(chat_id=self.chat_id, text=format_message(record))
        except TelegramError as e:
            raise NotifyError(f"Failed to notify admin about user {record.id}: {e}") from e
        logger.info(f"Admin notified about user {record.id}")

    def dispatch(self, record: UserRecord) -> asyncio.Task:
        """Schedule ``notify`` in the background. Must be called from a running loop."""
        task = asyncio.create_task(self._notify_quietly(record))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _notify_quietly(self, record: UserRecord) -> None:
        try:
            await self.notify(record)
        except NotifyError as e:
            logger.error(str(e))

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every notification still in flight."""
        if not self._pending:
            return
        logger.info(f"Waiting for {len(self._pending)} pending notification(s)...")
        await asyncio.gather(*self._pending, return_exceptions=True)
