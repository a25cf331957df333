"""Tests for service-account bundle loading."""

from __future__ import annotations

import json

import pytest

from db.connection import close_firestore, load_credentials


def test_missing_bundle(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_credentials(str(tmp_path / "nope.json"))


def test_bundle_is_not_json(tmp_path):
    bundle = tmp_path / "serviceAccount.json"
    bundle.write_text("{ this is not json")
    with pytest.raises(ValueError):
        load_credentials(str(bundle))


def test_bundle_is_not_a_service_account(tmp_path):
    bundle = tmp_path / "serviceAccount.json"
    bundle.write_text(json.dumps({"type": "authorized_user", "client_id": "x"}))
    with pytest.raises(ValueError):
        load_credentials(str(bundle))


def test_close_without_init_is_noop():
    close_firestore()
