"""
models/submission.py
--------------------
Validation gate for incoming form submissions.
Turns a raw mapping (JSON body or HTML form fields) into a UserRecord,
or raises ValidationError listing every field that failed.
No network or storage access happens here.
"""

import re
from typing import Annotated, Any, Mapping

from pydantic import BaseModel, ConfigDict, EmailStr, StringConstraints, field_validator
from pydantic import ValidationError as PydanticValidationError

from errors import ValidationError
from models.user_record import UserRecord

_PHONE_ALLOWED = re.compile(r"^\+?[\d\s\-().]+$")
_PHONE_SEPARATORS = re.compile(r"[\s\-().]")
_PHONE_E164 = re.compile(r"^\+?[1-9]\d{6,14}$")
_RESERVED_ID = re.compile(r"^__.*__$")

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class Submission(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: NonEmptyStr
    name: NonEmptyStr
    email: EmailStr
    mobile: str
    checkbox1: bool

    @field_validator("id")
    @classmethod
    def _check_document_id(cls, value: str) -> str:
        # Firestore document id rules
        if "/" in value:
            raise ValueError("must not contain '/'")
        if value in (".", ".."):
            raise ValueError("must not be '.' or '..'")
        if _RESERVED_ID.match(value):
            raise ValueError("must not match the reserved pattern __.*__")
        if len(value.encode("utf-8")) > 1500:
            raise ValueError("must be at most 1500 bytes")
        return value

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("mobile")
    @classmethod
    def _check_mobile(cls, value: str) -> str:
        value = value.strip()
        if not _PHONE_ALLOWED.match(value):
            raise ValueError("not a valid phone number")
        compact = _PHONE_SEPARATORS.sub("", value)
        if not _PHONE_E164.match(compact):
            raise ValueError("not a valid phone number")
        return compact


def _to_error(err: dict) -> dict:
    field = err["loc"][0] if err.get("loc") else "body"
    return {"field": str(field), "message": err["msg"]}


def validate_submission(raw: Any) -> UserRecord:
    """
    Validate a raw submission.

    Args:
        raw: Mapping of field name to string/boolean value.

    Returns:
        The validated UserRecord.

    Raises:
        ValidationError: With one entry per failed field.
    """
    if not isinstance(raw, Mapping):
        raise ValidationError([{"field": "body", "message": "expected an object of form fields"}])

    try:
        sub = Submission.model_validate(dict(raw))
    except PydanticValidationError as e:
        raise ValidationError([_to_error(err) for err in e.errors()]) from e

    return UserRecord(
        id=sub.id,
        name=sub.name,
        email=sub.email,
        mobile=sub.mobile,
        checkbox1=sub.checkbox1,
    )
