from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from sendiabete.core.config import Settings
from sendiabete.core.errors import AccountMissing, AuthRequired, Forbidden, NotFound
from sendiabete.core.security import JWTError, decode_token
from sendiabete.services.accounts import Account, AccountLedger
from sendiabete.services.catalog import LicenseCatalog
from sendiabete.services.readings import ReadingLedger
from sendiabete.services.upload import UploadWorkflow

bearer_scheme = HTTPBearer(auto_error=False)

# Components are built once in create_app() and hung on app.state

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_catalog(request: Request) -> LicenseCatalog:
    return request.app.state.catalog

def get_accounts(request: Request) -> AccountLedger:
    return request.app.state.accounts

def get_readings(request: Request) -> ReadingLedger:
    return request.app.state.readings

def get_workflow(request: Request) -> UploadWorkflow:
    return request.app.state.workflow

def get_current_account(
        creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
        accounts: AccountLedger = Depends(get_accounts),
        settings: Settings = Depends(get_settings),
) -> Account:
    if creds is None:
        raise AuthRequired()
    try:
        payload = decode_token(creds.credentials, settings)
    except JWTError:
        raise AuthRequired("Invalid or expired token")
    sub = payload.get("sub")
    if not sub:
        raise AuthRequired("Invalid token (missing sub)")

    try:
        return accounts.get(sub)
    except NotFound:
        raise AccountMissing()

def require_admin(account: Account = Depends(get_current_account)) -> Account:
    if not account.is_admin:
        raise Forbidden()
    return account
