"""Session manager owning the authenticated session and its persisted keys"""

import json
import threading
from typing import Optional

from ..models.session import Session, UserProfile
from ..storage.base import KeyValueStorage
from ..utils.logger import get_logger, mask_token

logger = get_logger(__name__)

ACCESS_TOKEN_KEY = "accessToken"
REFRESH_TOKEN_KEY = "refreshToken"
USER_KEY = "user"
SESSION_KEYS = (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, USER_KEY)


class SessionManager:
    """Owns the current session and keeps the three persisted keys in step

    Storage offers no transactions, so every write of the three keys happens
    under one lock and a reader never receives a partial session.
    """

    def __init__(self, storage: KeyValueStorage):
        """
        Initialize session manager

        Args:
            storage: Key-value storage holding accessToken, refreshToken and user
        """
        self.storage = storage
        self._session: Optional[Session] = None
        self._lock = threading.RLock()

    @property
    def current(self) -> Optional[Session]:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def is_admin(self) -> bool:
        return self._session is not None and self._session.is_admin

    @property
    def user(self) -> Optional[UserProfile]:
        return self._session.user if self._session else None

    @property
    def access_token(self) -> Optional[str]:
        return self._session.access_token if self._session else None

    @property
    def refresh_token(self) -> Optional[str]:
        return self._session.refresh_token if self._session else None

    def load(self) -> Optional[Session]:
        """
        Restore the session persisted by a previous run

        Returns:
            The session if all three keys exist and parse, otherwise None
            (partial leftovers are removed)
        """
        with self._lock:
            access_token = self.storage.get(ACCESS_TOKEN_KEY)
            refresh_token = self.storage.get(REFRESH_TOKEN_KEY)
            raw_user = self.storage.get(USER_KEY)

            if not (access_token or refresh_token or raw_user):
                self._session = None
                return None

            try:
                user = UserProfile.from_dict(json.loads(raw_user)) if raw_user else None
                if user is None or not access_token or not refresh_token:
                    raise ValueError("incomplete session")
                self._session = Session(access_token=access_token, refresh_token=refresh_token, user=user)
            except (ValueError, KeyError, TypeError) as e:
                logger.warning(f"[Session] Discarding persisted session: {e}")
                self._remove_keys()
                self._session = None
                return None

            logger.info(f"[Session] Restored session for {user.email}")
            return self._session

    def set(self, session: Session) -> None:
        """Store session in memory and persist all three fields"""
        with self._lock:
            self._session = session
            self.storage.set(ACCESS_TOKEN_KEY, session.access_token)
            self.storage.set(REFRESH_TOKEN_KEY, session.refresh_token)
            self.storage.set(USER_KEY, json.dumps(session.user.to_dict()))
            logger.info(f"[Session] Session set for {session.user.email} (role={session.user.role.value})")

    def update_tokens(self, access_token: str, refresh_token: str) -> Session:
        """
        Replace the token pair after a successful refresh

        Raises:
            RuntimeError: if there is no session to update
        """
        with self._lock:
            if self._session is None:
                raise RuntimeError("No session to update")
            updated = Session(access_token=access_token, refresh_token=refresh_token, user=self._session.user)
            self.set(updated)
            logger.debug(f"[Session] Tokens rotated, access={mask_token(access_token)}")
            return updated

    def update_user(self, user: UserProfile) -> None:
        """Replace the stored profile, e.g. after a profile edit"""
        with self._lock:
            if self._session is None:
                logger.warning("[Session] Ignoring profile update without a session")
                return
            self.set(Session(access_token=self._session.access_token,
                             refresh_token=self._session.refresh_token,
                             user=user))

    def clear(self) -> None:
        """Remove the session from memory and storage"""
        with self._lock:
            had_session = self._session is not None
            self._session = None
            self._remove_keys()
            if had_session:
                logger.info("[Session] Session cleared")

    def _remove_keys(self) -> None:
        for key in SESSION_KEYS:
            self.storage.remove(key)
