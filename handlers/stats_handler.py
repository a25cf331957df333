"""
handlers/stats_handler.py
--------------------------
Handles the /stats command.
Reports how many user records are currently stored.
"""

from telegram import Update
from telegram.ext import ContextTypes

from errors import StorageError
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)


@authorized_only
@rate_limited
async def stats_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /stats command - reply with the total number of stored users."""
    repo = context.bot_data["user_repo"]
    try:
        total = await repo.count()
    except StorageError as e:
        logger.error(f"Stats query failed for user {update.effective_user.id}: {e}")
        await update.message.reply_text("⚠️ Could not fetch stats right now. Please try again later.")
        return

    logger.info(f"User {update.effective_user.id} requested stats: {total}")
    await update.message.reply_text(f"Total registered users: {total}")
