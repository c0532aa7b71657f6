"""Anonymous session identifiers for the no-sign-in flow."""

import secrets
import string
from dataclasses import dataclass
from typing import Protocol

SESSION_ID_KEY = "photo_describe_session_id"
SESSION_ID_PREFIX = "session_"
_ALPHABET = string.digits + string.ascii_lowercase
_RANDOM_LENGTH = 26


class KeyValueStorage(Protocol):
    """Client-side key/value storage."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value for a key, if any."""

    def set_item(self, key: str, value: str) -> None:
        """Store a value under a key."""


@dataclass
class SessionIdProvider:
    """Issues and persists a random opaque session id."""

    storage: KeyValueStorage
    key: str = SESSION_ID_KEY

    def get_session_id(self) -> str:
        """Return the stored session id, creating one only when none is stored.

        Any non-empty stored value is kept as is, so a client never loses
        access to photos saved under an id it already holds.
        """
        session_id = self.storage.get_item(self.key)
        if not session_id:
            session_id = generate_session_id()
            self.storage.set_item(self.key, session_id)
        return session_id


def generate_session_id() -> str:
    """Generate a random session id."""
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(_RANDOM_LENGTH))
    return f"{SESSION_ID_PREFIX}{suffix}"
