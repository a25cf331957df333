"""
db/connection.py
----------------
Manages the Firestore client lifecycle.
Loads the service-account credential bundle, opens an async Firestore
client bound to its own firebase_admin app, and tears it down at shutdown.
"""

import json
from pathlib import Path

import firebase_admin
from firebase_admin import credentials, firestore_async

from utils.logger import get_logger

logger = get_logger(__name__)

APP_NAME = "form-intake"


def load_credentials(path: str) -> credentials.Certificate:
    """
    Load a service-account credential bundle from disk.

    Args:
        path: Path to the service-account JSON file.

    Returns:
        A firebase_admin Certificate credential.

    Raises:
        FileNotFoundError: If the bundle does not exist.
        ValueError: If the bundle is not a valid service-account file.
    """
    bundle = Path(path)
    if not bundle.is_file():
        raise FileNotFoundError(f"Service-account bundle not found: {bundle}")
    try:
        data = json.loads(bundle.read_text(encoding="utf-8"))
        return credentials.Certificate(data)
    except (json.JSONDecodeError, ValueError) as e:
        raise ValueError(f"Malformed service-account bundle {bundle}: {e}") from e


def init_firestore(cred: credentials.Certificate, database_url: str = ""):
    """
    Initialize the firebase_admin app and return an async Firestore client.
    Call from inside the running event loop that will use the client.

    Args:
        cred: Credential returned by ``load_credentials``.
        database_url: Optional Firebase database URL passed to the app options.

    Returns:
        A google.cloud.firestore.AsyncClient.

    Raises:
        ValueError: If the Firebase app is already initialized.
    """
    options = {"databaseURL": database_url} if database_url else None
    try:
        app = firebase_admin.initialize_app(cred, options, name=APP_NAME)
    except ValueError as e:
        logger.error(f"Failed to initialize Firebase app: {e}")
        raise
    logger.info(f"Firestore client initialized for project '{cred.project_id}'.")
    return firestore_async.client(app)


def close_firestore() -> None:
    """Close the Firestore client by deleting its firebase_admin app."""
    try:
        app = firebase_admin.get_app(APP_NAME)
    except ValueError:
        return
    firebase_admin.delete_app(app)
    logger.info("Firestore client closed.")
