"""
handlers/start_handler.py
--------------------------
Handles /start, /help and /myid commands.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)

HELP_TEXT = (
    "🤖 FormIntake admin bot\n\n"
    "I post a message here whenever someone submits the registration form.\n\n"
    "Commands:\n"
    "/start - show this message\n"
    "/help - show this message\n"
    "/stats - total registered users\n"
    "/myid - show your chat id (use it as ADMIN_CHAT_ID)"
)


@rate_limited
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - show welcome message."""
    user = update.effective_user
    logger.info(f"User {user.id} ({user.first_name}) started the bot.")
    await update.message.reply_text(HELP_TEXT)


@rate_limited
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show all available commands."""
    await update.message.reply_text(HELP_TEXT)


async def myid_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /myid command - show the chat id for configuring admin alerts."""
    chat = update.effective_chat
    await update.message.reply_text(
        f"🆔 This chat id: {chat.id}\n"
        f"Set ADMIN_CHAT_ID={chat.id} in your .env file to receive new-user alerts here."
    )
