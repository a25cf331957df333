"""
main.py
-------
Entry point for the FormIntake service.

Responsibilities:
    - Load the Firestore credential bundle and open the client.
    - Build the Telegram bot (admin alerts + /stats) and the FastAPI app.
    - Run the web server and bot polling on one event loop.
    - Shut everything down in order: HTTP drain, polling, notifications, bot, Firestore.
"""

import asyncio
import contextlib
import signal
import sys

import uvicorn
from fastapi import FastAPI
from firebase_admin import credentials
from telegram import BotCommand
from telegram.ext import Application, CommandHandler

import config
from db.connection import close_firestore, init_firestore, load_credentials
from handlers.start_handler import help_command, myid_command, start_command
from handlers.stats_handler import stats_command
from repositories.user_repo import UserRepository
from security.rate_limiter import RateLimiter
from services.intake_service import IntakeService
from services.notifier import AdminNotifier
from utils.logger import get_logger
from web.app import create_app

logger = get_logger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    commands = [
        BotCommand("start", "🚀 Start the bot"),
        BotCommand("help", "📖 Show help"),
        BotCommand("stats", "📊 Total registered users"),
        BotCommand("myid", "🆔 Show this chat id"),
    ]
    await application.bot.set_my_commands(commands)
    logger.info("Bot commands menu registered successfully.")


def build_bot(token: str, repo: UserRepository) -> Application:
    """Build the Telegram application and register its command handlers."""
    app = Application.builder().token(token).build()
    app.bot_data["user_repo"] = repo

    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(CommandHandler("myid", myid_command))
    app.add_handler(CommandHandler("stats", stats_command))
    return app


class IntakeServer(uvicorn.Server):
    """
    uvicorn server that leaves signal handling to `serve()`.

    Stock uvicorn re-raises the captured SIGINT/SIGTERM once it has stopped,
    which would kill the process before the bot and notifications shut down.
    """

    def install_signal_handlers(self) -> None:
        pass

    def capture_signals(self):
        return contextlib.nullcontext()


def build_web_app(service: IntakeService) -> FastAPI:
    """Build the FastAPI app with the middleware enabled in config."""
    limiter = (
        RateLimiter(config.RATE_LIMIT_REQUESTS, config.RATE_LIMIT_WINDOW_SECONDS)
        if config.RATE_LIMIT_ENABLED
        else None
    )
    return create_app(
        service,
        request_logging=config.REQUEST_LOGGING_ENABLED,
        rate_limiter=limiter,
        gzip=config.GZIP_ENABLED,
        cors_origins=config.CORS_ORIGINS,
    )


async def serve(cred: credentials.Certificate) -> None:
    """
    Run the web server and the bot until SIGINT or SIGTERM arrives.

    Shutdown order: HTTP drain -> polling stop -> notification drain ->
    bot shutdown -> Firebase app deleted.
    """
    client = init_firestore(cred, config.FIREBASE_DATABASE_URL)
    try:
        repo = UserRepository(client, config.USERS_COLLECTION)
        bot_app = build_bot(config.TELEGRAM_BOT_TOKEN, repo)
        notifier = AdminNotifier(bot_app.bot, config.ADMIN_CHAT_ID)
        service = IntakeService(repo, notifier)

        server = IntakeServer(
            uvicorn.Config(build_web_app(service), host=config.HOST, port=config.PORT, log_config=None)
        )

        loop = asyncio.get_running_loop()
        for sig in SHUTDOWN_SIGNALS:
            # a second signal makes uvicorn force-exit open connections
            loop.add_signal_handler(sig, server.handle_exit, sig, None)
        try:
            async with bot_app:
                await set_bot_commands(bot_app)
                await bot_app.start()
                await bot_app.updater.start_polling(drop_pending_updates=True, allowed_updates=["message"])
                logger.info(f"🚀 FormIntake listening on {config.HOST}:{config.PORT}. Press Ctrl+C to stop.")
                try:
                    await server.serve()
                finally:
                    logger.info("Shutting down...")
                    await bot_app.updater.stop()
                    await notifier.drain()
                    await bot_app.stop()
        finally:
            for sig in SHUTDOWN_SIGNALS:
                loop.remove_signal_handler(sig)
    finally:
        close_firestore()


def main() -> None:
    """Initialize clients and run the service."""

    # ── 1. Configuration checks ───────────────────────────
    if not config.TELEGRAM_BOT_TOKEN:
        logger.error("TELEGRAM_BOT_TOKEN is not set.")
        sys.exit(1)
    if not config.ADMIN_CHAT_ID:
        logger.warning("ADMIN_CHAT_ID is not set; new-user alerts are disabled.")

    # ── 2. Firestore credentials ──────────────────────────
    logger.info("Loading Firestore credentials...")
    try:
        cred = load_credentials(config.FIREBASE_CREDENTIALS)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Cannot start without a valid service-account bundle: {e}")
        sys.exit(1)

    # ── 3. Run web server + bot until a shutdown signal ───
    asyncio.run(serve(cred))
    logger.info("FormIntake stopped.")


if __name__ == "__main__":
    main()
