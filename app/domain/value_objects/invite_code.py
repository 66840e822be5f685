"""Invite code value object."""

import secrets
import string
from dataclasses import dataclass

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits


@dataclass(frozen=True)
class InviteCode:
    """Short opaque uppercase alphanumeric token; comparisons are case-insensitive."""

    value: str

    def __post_init__(self) -> None:
        """Validate invite code."""
        if not self.value:
            raise ValueError("Invite code cannot be empty")
        if any(ch not in INVITE_CODE_ALPHABET for ch in self.value):
            raise ValueError("Invite code must be uppercase alphanumeric")

    @classmethod
    def parse(cls, raw: str) -> "InviteCode":
        """
        Normalise user input into an invite code.

        Args:
            raw: Code as typed or taken from a share URL

        Returns:
            InviteCode with surrounding whitespace removed and upper-cased

        Raises:
            ValueError: If the result is empty or not alphanumeric
        """
        return cls((raw or "").strip().upper())

    @classmethod
    def generate(cls, length: int = 8) -> "InviteCode":
        """Generate a random code from a cryptographic source."""
        if length <= 0:
            raise ValueError("Invite code length must be positive")
        return cls("".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length)))

    def __str__(self) -> str:
        return self.value
