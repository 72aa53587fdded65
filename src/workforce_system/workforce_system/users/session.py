"""Authenticated session held in a caller-supplied key-value store.

In the Flask app the store is ``flask.session``; tests pass a plain dict.
Only keys under ``auth.`` belong to the session, anything else in the
store is left alone on teardown.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import MutableMapping, Optional

from ..core.constants import SESSION_KEY_PREFIX
from ..core.enums import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthSession:
    """What we keep about the signed-in user."""

    user_id: int
    full_name: str
    role: Role
    organization_id: Optional[int]
    access_token: str
    issued_at: datetime


class SessionProvider:
    _FIELDS = ("user_id", "full_name", "role", "organization_id", "access_token", "issued_at")

    def __init__(self, store: MutableMapping):
        self._store = store
        self._current: Optional[AuthSession] = None

    @staticmethod
    def _key(name: str) -> str:
        return f"{SESSION_KEY_PREFIX}{name}"

    @property
    def current(self) -> Optional[AuthSession]:
        return self._current

    def init(self) -> Optional[AuthSession]:
        """Restore the persisted session, if a complete one is stored."""
        token = self._store.get(self._key("access_token"))
        user_id = self._store.get(self._key("user_id"))
        if not token or user_id is None:
            self._current = None
            return None

        try:
            self._current = AuthSession(
                user_id=int(user_id),
                full_name=str(self._store.get(self._key("full_name")) or ""),
                role=Role(self._store.get(self._key("role"))),
                organization_id=self._store.get(self._key("organization_id")),
                access_token=str(token),
                issued_at=datetime.fromisoformat(str(self._store.get(self._key("issued_at")))),
            )
        except (TypeError, ValueError):
            logger.warning("Discarding malformed persisted session")
            self.teardown()
            return None
        return self._current

    def start(self, session: AuthSession) -> AuthSession:
        self._store[self._key("user_id")] = session.user_id
        self._store[self._key("full_name")] = session.full_name
        self._store[self._key("role")] = session.role.value
        self._store[self._key("organization_id")] = session.organization_id
        self._store[self._key("access_token")] = session.access_token
        self._store[self._key("issued_at")] = session.issued_at.isoformat()
        self._current = session
        return session

    def teardown(self) -> None:
        for key in [k for k in list(self._store.keys()) if str(k).startswith(SESSION_KEY_PREFIX)]:
            self._store.pop(key, None)
        self._current = None
