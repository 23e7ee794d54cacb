"""Sign-in, token refresh and sign-out"""

from fastapi import APIRouter, Depends
import logging

from api.dependencies import get_current_user, get_store
from api.store import REFRESH_PREFIX, SandboxStore
from domain.schemas.auth_schemas import Credentials, RefreshRequest, TokenPair
from domain.schemas.user_schemas import User

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger("nidus.sandbox.auth")


def _tokens(store: SandboxStore, user: User) -> dict:
    return TokenPair(
        access_token=store.access_token_for(user),
        refresh_token=store.refresh_token_for(user),
    ).model_dump()


@router.post("/login")
def login(credentials: Credentials, store: SandboxStore = Depends(get_store)):
    user = store.authenticate(credentials.email, credentials.password)
    logger.info("User %s signed in", user.id)
    return _tokens(store, user)


@router.post("/refresh")
def refresh(body: RefreshRequest, store: SandboxStore = Depends(get_store)):
    user = store.user_for_token(body.refresh_token, prefix=REFRESH_PREFIX)
    return _tokens(store, user)


@router.post("/logout")
def logout(user: User = Depends(get_current_user)):
    logger.info("User %s signed out", user.id)
    return {"message": "Logged out"}
