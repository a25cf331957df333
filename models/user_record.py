"""
models/user_record.py
---------------------
Domain model for a submitted user record.
"""

from dataclasses import asdict, dataclass


@dataclass
class UserRecord:
    """
    A validated form submission, stored as one flat document.

    Attributes:
        id: Caller-supplied identifier, used as the document key.
        name: Display name.
        email: Normalized (lower-cased) email address.
        mobile: Phone number in compact form (digits with optional leading '+').
        checkbox1: Consent flag.
    """
    id: str
    name: str
    email: str
    mobile: str
    checkbox1: bool

    def to_dict(self) -> dict:
        """Document body written to the store."""
        return asdict(self)

    def __str__(self) -> str:
        return f"{self.id} | {self.name} | {self.email}"
