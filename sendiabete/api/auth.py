from fastapi import APIRouter, Depends

from sendiabete.api.deps import get_accounts, get_current_account, get_settings
from sendiabete.core.config import Settings
from sendiabete.core.security import create_access_token
from sendiabete.schemas.auth import LoginIn, SessionOut, TokenOut
from sendiabete.services.accounts import Account, AccountLedger

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/login", response_model=TokenOut)
def login(
    payload: LoginIn,
    accounts: AccountLedger = Depends(get_accounts),
    settings: Settings = Depends(get_settings),
):
    # AuthFailure carries the same message for unknown id and wrong password
    account = accounts.authenticate(payload.identifier, payload.password)
    token = create_access_token(subject=account.account_id, settings=settings)
    return TokenOut(
        access_token=token,
        account_id=account.account_id,
        display_name=account.display_name,
        is_admin=account.is_admin,
    )

@router.get("/me", response_model=SessionOut)
def me(account: Account = Depends(get_current_account)):
    return SessionOut(
        account_id=account.account_id,
        display_name=account.display_name,
        is_admin=account.is_admin,
    )
