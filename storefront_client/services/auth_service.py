"""Login and logout on top of the session manager"""

from typing import Optional, Tuple

from ..backend_client import StorefrontBackendClient
from ..errors import ErrorHandler, StorefrontError
from ..models.session import Session, UserProfile
from ..utils.logger import get_logger
from .navigation import Navigator
from .session_manager import SessionManager

logger = get_logger(__name__)


class AuthService:
    """Creates and destroys the session"""

    def __init__(self, backend_client: StorefrontBackendClient, session_manager: SessionManager,
                 navigator: Navigator):
        self.backend = backend_client
        self.session_manager = session_manager
        self.navigator = navigator

    async def login_with_google(self, id_token: str) -> Tuple[bool, str, Optional[Session]]:
        """
        Log in with a Google id token

        Args:
            id_token: Credential returned by Google sign-in

        Returns:
            Tuple of (success, message, session)
        """
        if not id_token:
            return False, "Missing Google credential", None
        try:
            session = await self.backend.login_with_google(id_token)
        except StorefrontError as e:
            logger.error(f"[Auth] Login failed: {e.to_dict()}")
            return False, ErrorHandler.user_message(e, "Failed to login. Please try again."), None
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"[Auth] Login response malformed: {e}")
            return False, "Failed to login. Please try again.", None

        self.session_manager.set(session)
        self.navigator.redirect("/")
        return True, f"Welcome, {session.user.name or session.user.email}", session

    async def logout(self) -> None:
        """Log out; the local session is cleared even if the backend call fails"""
        try:
            await self.backend.logout()
        except StorefrontError as e:
            logger.warning(f"[Auth] Logout call failed, clearing locally: {e.message}")
        finally:
            self.session_manager.clear()
            self.navigator.redirect("/")

    async def update_profile(self, **updates) -> Tuple[bool, str, Optional[UserProfile]]:
        """Update the profile and keep the stored session user in step"""
        try:
            profile = await self.backend.update_profile(**updates)
        except StorefrontError as e:
            logger.error(f"[Auth] Profile update failed: {e.to_dict()}")
            return False, ErrorHandler.user_message(e, "Failed to update profile"), None
        self.session_manager.update_user(profile)
        return True, "Profile updated", profile
