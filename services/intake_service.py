"""
services/intake_service.py
--------------------------
Business logic for form submissions.
Orchestrates the validation gate, the UserRepository and the AdminNotifier.
"""

from typing import Any

from models.submission import validate_submission
from models.user_record import UserRecord
from repositories.user_repo import UserRepository
from services.notifier import AdminNotifier
from utils.logger import get_logger

logger = get_logger(__name__)


class IntakeService:
    """
    Handles one form submission end to end.

    Workflow:
        1. Validate the raw submission (ValidationError stops here).
        2. Persist via the repository (StorageError stops here).
        3. Hand the stored record to the notifier as a background task.
    """

    def __init__(self, repo: UserRepository, notifier: AdminNotifier):
        self.repo = repo
        self.notifier = notifier

    async def submit(self, raw: Any) -> UserRecord:
        """
        Validate, store and announce a submission.

        Args:
            raw: Mapping of submitted form fields.

        Returns:
            The stored UserRecord.

        Raises:
            ValidationError: Submission rejected; nothing was written.
            StorageError: The write failed; no notification was sent.
        """
        record = validate_submission(raw)
        await self.repo.put(record)
        self.notifier.dispatch(record)
        logger.info(f"Submission accepted for user {record.id}")
        return record
