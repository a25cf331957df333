"""Tests for the Telegram command handlers."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest
from google.api_core.exceptions import ServiceUnavailable

import config
from handlers.start_handler import HELP_TEXT, myid_command, start_command
from handlers.stats_handler import stats_command
from models.user_record import UserRecord

from tests.conftest import make_update


def _context(repo):
    return SimpleNamespace(bot_data={"user_repo": repo}, args=[])


def _seed(repo, n: int) -> None:
    for i in range(n):
        record = UserRecord(
            id=f"u{i}", name="Ann", email="ann@example.com", mobile="+15551234567", checkbox1=True
        )
        asyncio.run(repo.put(record))


class TestStats:

    def test_replies_with_count(self, repo):
        _seed(repo, 3)
        update = make_update()
        asyncio.run(stats_command(update, _context(repo)))
        assert update.message.replies == ["Total registered users: 3"]

    def test_storage_failure_gives_generic_reply(self, repo, firestore):
        firestore.error = ServiceUnavailable("down")
        update = make_update()
        asyncio.run(stats_command(update, _context(repo)))
        assert len(update.message.replies) == 1
        assert "Could not fetch stats" in update.message.replies[0]
        assert "down" not in update.message.replies[0]

    def test_open_to_everyone_when_no_whitelist(self, repo, monkeypatch):
        monkeypatch.setattr(config, "ALLOWED_USER_IDS", [])
        update = make_update(user_id=999)
        asyncio.run(stats_command(update, _context(repo)))
        assert update.message.replies == ["Total registered users: 0"]

    def test_whitelist_blocks_other_users(self, repo, monkeypatch):
        monkeypatch.setattr(config, "ALLOWED_USER_IDS", [1])
        update = make_update(user_id=999)
        asyncio.run(stats_command(update, _context(repo)))
        assert "restricted" in update.message.replies[0]

    def test_whitelist_admits_admin(self, repo, monkeypatch):
        monkeypatch.setattr(config, "ALLOWED_USER_IDS", [1])
        update = make_update(user_id=1)
        asyncio.run(stats_command(update, _context(repo)))
        assert update.message.replies == ["Total registered users: 0"]

    def test_rate_limited(self, repo, monkeypatch):
        from security import rate_limiter

        monkeypatch.setattr(rate_limiter.bot_limiter, "max_requests", 1)
        first, second = make_update(), make_update()
        asyncio.run(stats_command(first, _context(repo)))
        asyncio.run(stats_command(second, _context(repo)))
        assert first.message.replies == ["Total registered users: 0"]
        assert "Too many commands" in second.message.replies[0]


def test_start_shows_help():
    update = make_update()
    asyncio.run(start_command(update, SimpleNamespace(bot_data={})))
    assert update.message.replies == [HELP_TEXT]
    assert "/stats" in HELP_TEXT


def test_myid_echoes_chat_id():
    update = make_update(chat_id=-100123)
    asyncio.run(myid_command(update, SimpleNamespace(bot_data={})))
    assert "-100123" in update.message.replies[0]
    assert "ADMIN_CHAT_ID" in update.message.replies[0]
