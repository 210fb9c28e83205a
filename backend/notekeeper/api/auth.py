from __future__ import annotations

from fastapi import APIRouter, Depends, status

from notekeeper.api.deps import get_accounts
from notekeeper.models.auth import LoginRequest, RegisterRequest, TokenResponse, UserOut
from notekeeper.services.accounts import AccountDirectory
from notekeeper.utils.jwt_auth import create_access_token

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest, accounts: AccountDirectory = Depends(get_accounts)) -> UserOut:
    user = accounts.register(req.username, req.password)
    return UserOut(id=user.id, username=user.username)


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest, accounts: AccountDirectory = Depends(get_accounts)) -> TokenResponse:
    user_id = accounts.authenticate(req.username, req.password)
    token = create_access_token(subject=user_id)
    return TokenResponse(access_token=token)
