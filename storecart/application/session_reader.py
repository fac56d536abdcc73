"""Read-only access to the host site's current-user record."""
from __future__ import annotations

import logging

from pydantic import ValidationError

from storecart.core.constants import SESSION_KEY
from storecart.domain.session import Session, session_id
from storecart.domain.value_objects import Scope
from storecart.integrations.storage import PersistentStore

logger = logging.getLogger(__name__)


class SessionReader:
    """Resolve the current session on every call; nothing is cached."""

    def __init__(self, store: PersistentStore) -> None:
        self._store = store

    def current_session(self) -> Session | None:
        # Any long-term text wins, even unreadable text; only an absent or
        # empty record defers to the short-term scope.
        scope = Scope.LONG_TERM
        if not self._store.raw_get(Scope.LONG_TERM, SESSION_KEY):
            scope = Scope.SHORT_TERM
        raw = self._store.get(scope, SESSION_KEY)
        if raw is None:
            return None
        if not isinstance(raw, dict):
            logger.warning("Ignoring session record of type %s", type(raw).__name__)
            return None
        try:
            return Session.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Ignoring unreadable session record: %s", exc)
            return None

    def current_user_id(self) -> str | None:
        return session_id(self.current_session())
