"""
Authentication session: sign in/up/out, profile loading and token refresh.
"""

from typing import Optional

from adapters.http_adapter import HTTPAdapter
from app.exceptions import APIError
from domain.schemas.user_schemas import User
from repositories import AuthRepository, UserRepository
from services import roles
from services.base_service import BaseService


class AuthService(BaseService):
    """Holds who is signed in; errors are kept in ``error`` rather than raised"""

    def __init__(
        self,
        api: HTTPAdapter,
        auth_repository: Optional[AuthRepository] = None,
        user_repository: Optional[UserRepository] = None,
    ):
        super().__init__("nidus.auth")
        self.api = api
        self.auth_repository = auth_repository or AuthRepository(api)
        self.user_repository = user_repository or UserRepository(api)
        self.is_authenticated = False
        self.current_user: Optional[User] = None

    def check_authentication(self) -> bool:
        """Restore the session from a stored token and try to load the profile"""
        self.is_authenticated = self.api.has_token
        if self.is_authenticated:
            self.load_user_profile()
        return self.is_authenticated

    def load_user_profile(self) -> Optional[User]:
        """Fetch the profile; failure leaves the session signed in"""
        try:
            self.current_user = self.user_repository.get_profile()
        except APIError as exc:
            self.log_warning("Profile load failed", error=exc)
            return None
        return self.current_user

    def sign_in(self, email: str, password: str) -> bool:
        if not email or not password:
            return self.fail("Email and password are required")
        with self.operation("sign_in"):
            tokens = self.auth_repository.login(email, password)
            if not tokens.access_token:
                self.api.clear_tokens()
                return self.fail("Received an empty access token")
            self.is_authenticated = True
            self.load_user_profile()
            self.log_info("Signed in", email=email)
            return True
        return False

    def sign_up(self, email: str, password: str) -> bool:
        if not email or not password:
            return self.fail("Email and password are required")
        with self.operation("sign_up"):
            self.current_user = self.auth_repository.register(email, password)
            self.is_authenticated = True
            return True
        return False

    def sign_out(self) -> None:
        """Sign out locally even when the server call fails"""
        try:
            self.auth_repository.logout()
        except APIError as exc:
            self.log_warning("Logout request failed", error=exc)
        finally:
            self.api.clear_tokens()
            self.is_authenticated = False
            self.current_user = None

    def refresh_token_if_needed(self) -> bool:
        """Refresh the access token; a failed refresh signs the user out"""
        refresh_token = self.api.token_store.refresh_token
        if not refresh_token:
            return False
        try:
            self.auth_repository.refresh_token(refresh_token)
        except APIError as exc:
            self.log_warning("Token refresh failed", error=exc)
            self.sign_out()
            return False
        return True

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    @property
    def is_super_admin(self) -> bool:
        return roles.is_super_admin(self.current_user)

    @property
    def is_coffee_shop_owner(self) -> bool:
        return roles.is_coffee_shop_owner(self.current_user)
