"""
security/rate_limiter.py
-------------------------
Rate limiting to prevent abuse.
Limits the number of requests a caller can make within a time window.
The same sliding-window limiter backs both the bot command decorator
(keyed by Telegram user id) and the HTTP middleware (keyed by client address).
"""

import time
from functools import wraps
from typing import Callable, Hashable

from telegram import Update
from telegram.ext import ContextTypes

from config import RATE_LIMIT_REQUESTS, RATE_LIMIT_WINDOW_SECONDS
from utils.logger import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    In-memory sliding-window limiter: {key: [timestamp1, timestamp2, ...]}.

    Args:
        max_requests: Max requests per window.
        window_seconds: Window duration in seconds.
        clock: Time source, overridable in tests.
    """

    def __init__(self, max_requests: int, window_seconds: float, clock: Callable[[], float] = time.time):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._timestamps: dict[Hashable, list[float]] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        """Number of keys currently tracked."""
        return len(self._timestamps)

    def _cleanup(self, key: Hashable, now: float) -> list[float]:
        """Remove expired timestamps for a key; drop the key once it has none left."""
        cutoff = now - self.window_seconds
        hits = [t for t in self._timestamps.get(key, []) if t > cutoff]
        if hits:
            self._timestamps[key] = hits
        else:
            self._timestamps.pop(key, None)
        return hits

    def _sweep(self, now: float) -> None:
        """Forget every key idle for a whole window. Runs at most once per window."""
        if now - self._last_sweep < self.window_seconds:
            return
        for key in list(self._timestamps):
            self._cleanup(key, now)
        self._last_sweep = now

    def allow(self, key: Hashable) -> bool:
        """Record a hit for ``key`` and return False if it is over the limit."""
        now = self.clock()
        self._sweep(now)
        hits = self._cleanup(key, now)
        if len(hits) >= self.max_requests:
            return False
        hits.append(now)
        self._timestamps[key] = hits
        return True

    def reset(self) -> None:
        self._timestamps.clear()


bot_limiter = RateLimiter(RATE_LIMIT_REQUESTS, RATE_LIMIT_WINDOW_SECONDS)


def rate_limited(func: Callable):
    """
    Decorator that enforces rate limiting per Telegram user.

    Configuration (via .env):
        RATE_LIMIT_REQUESTS: Max commands per window (default: 30).
        RATE_LIMIT_WINDOW_SECONDS: Window duration in seconds (default: 60).

    Behavior:
        - Tracks command timestamps per user.
        - If exceeded, replies with a warning and blocks the handler.
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if not bot_limiter.allow(user.id):
            logger.warning(f"⚠️ Rate limit hit for user {user.id}")
            await update.message.reply_text(
                "⚠️ Too many commands. Please wait a bit and try again."
            )
            return

        return await func(update, context, *args, **kwargs)

    return wrapper
