"""
Authentication service layer.

Coordinates the identity provider and the session store:
- login/register: provider call, then exactly one new session
- logout: drop the local session, then revoke the provider token (best-effort)
"""

from typing import Optional, Tuple

from ..api.identity_client import IdentityClient
from ..models.user import User
from ..services.session_store import SessionStore
from ..utils.exceptions import InvalidCredentialsError, ProviderHttpError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class AuthService:
    """Login, registration and logout flows"""

    def __init__(self, identity_client: IdentityClient, sessions: SessionStore):
        self.identity = identity_client
        self.sessions = sessions
        logger.info("Auth service initialized", identity=repr(identity_client))

    def login(self, email: str, password: str) -> Tuple[str, User]:
        """Authenticate with the provider and open a session"""
        try:
            user = self.identity.login(email, password)
        except ProviderHttpError as e:
            if e.is_credentials_error:
                raise InvalidCredentialsError() from e
            raise

        session_id = self.sessions.create_session(user)
        logger.info("User logged in", user_id=user.id)
        return session_id, user

    def register(
        self,
        email: str,
        password: str,
        username: str,
        phone_country_code: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> Tuple[str, User]:
        """Create the account with the provider and open a session"""
        try:
            user = self.identity.register(
                email,
                password,
                username,
                phone_country_code=phone_country_code,
                phone_number=phone_number,
            )
        except ProviderHttpError as e:
            if e.is_credentials_error:
                raise InvalidCredentialsError() from e
            raise

        session_id = self.sessions.create_session(user)
        logger.info("User registered", user_id=user.id)
        return session_id, user

    def logout(self, session_id: str) -> bool:
        """Invalidate the session locally and notify the provider"""
        user = self.sessions.delete_session(session_id)
        if user is None:
            logger.info("Logout attempted but session not found")
            return False

        self.identity.logout(user.access_token)
        logger.info("User logged out", user_id=user.id)
        return True

    def current_user(self, session_id: Optional[str]) -> Optional[User]:
        if not session_id:
            return None
        return self.sessions.get_user(session_id)
