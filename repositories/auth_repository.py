"""
Auth Repository - login, registration, logout and token refresh
"""

import logging

from repositories.base import ApiRepository
from domain.schemas.auth_schemas import (
    Credentials,
    MessageResponse,
    RefreshRequest,
    RegisterResult,
    TokenPair,
)
from domain.schemas.user_schemas import User

logger = logging.getLogger("nidus.auth")


class AuthRepository(ApiRepository):
    def login(self, email: str, password: str) -> TokenPair:
        """Authenticate and store the returned token pair"""
        tokens = self.api.post(
            "/auth/login",
            Credentials(email=email, password=password),
            TokenPair,
            requires_auth=False,
        )
        self.api.save_tokens(tokens.access_token, tokens.refresh_token)
        logger.info("Signed in as %s", email)
        return tokens

    def register(self, email: str, password: str) -> User:
        """Create an account; the returned token is stored without a refresh token"""
        result = self.api.post(
            "/user/create",
            Credentials(email=email, password=password),
            RegisterResult,
            requires_auth=False,
        )
        self.api.save_tokens(result.token, "")
        logger.info("Registered %s", email)
        return result.user

    def logout(self) -> MessageResponse:
        try:
            return self.api.post("/auth/logout", None, MessageResponse)
        finally:
            self.api.clear_tokens()

    def refresh_token(self, refresh_token: str) -> TokenPair:
        tokens = self.api.post(
            "/auth/refresh",
            RefreshRequest(refresh_token=refresh_token),
            TokenPair,
            requires_auth=False,
        )
        self.api.save_tokens(tokens.access_token, tokens.refresh_token)
        return tokens
