"""
repositories/user_repo.py
--------------------------
Data access layer for user records.
Every call is a remote round trip; nothing is cached.
"""

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError

from errors import StorageError
from models.user_record import UserRecord
from utils.logger import get_logger

logger = get_logger(__name__)

_TRANSPORT_ERRORS = (GoogleAPIError, GoogleAuthError)


class UserRepository:
    """Repository for the user records collection."""

    def __init__(self, client, collection: str = "userdata"):
        """
        Args:
            client: An async Firestore client.
            collection: Name of the collection holding user records.
        """
        self.client = client
        self.collection = collection

    async def put(self, record: UserRecord) -> None:
        """
        Write a record at key ``record.id``, overwriting any existing document.

        Raises:
            StorageError: If the write fails.
        """
        doc = self.client.collection(self.collection).document(record.id)
        try:
            await doc.set(record.to_dict())
        except _TRANSPORT_ERRORS as e:
            logger.error(f"Failed to write user {record.id}: {e}")
            raise StorageError(f"Failed to write user {record.id}") from e
        logger.info(f"User {record.id} written to '{self.collection}'.")

    async def count(self) -> int:
        """
        Count all records in the collection (server-side aggregation).

        Raises:
            StorageError: If the query fails.
        """
        query = self.client.collection(self.collection).count(alias="total")
        try:
            results = await query.get()
        except _TRANSPORT_ERRORS as e:
            logger.error(f"Failed to count users: {e}")
            raise StorageError("Failed to count users") from e
        return int(results[0][0].value) if results and results[0] else 0
